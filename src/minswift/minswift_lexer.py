"""
Lexical analyzer for the MinSwift language.

The parser only needs a finished list of classified tokens; this module is the
small front door that produces one from source text so the toolchain can be
driven end to end.

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single classified token with its raw text and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize(source): Lex a whole source string into a token list ending in EOF.

Features:
    - Skips whitespace and `//` line comments
    - Longest-match recognition of operators and punctuation (`->` before `-`)
    - Recognizes identifiers, keywords, integer and floating literals

Raises:
    LexError: If a number literal contains more than one decimal point.

Example:
    >>> tokenize("func f() -> Int { 1 }")[0]
    Token(FUNC, func)
"""

import logging
from dataclasses import dataclass

from minswift.minswift_constants import (
    EOF,
    ERROR,
    FLOAT,
    IDENT,
    INTEGER,
    token_hashmap,
)
from minswift.minswift_errors import LexError

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind (str): The token kind, one of `minswift_constants.token_kinds`.
        text (str): The raw source text the token was lexed from.
        line (int): The 1-based line number where the token starts (0 if synthesized).
        col (int): The 1-based column number where the token starts (0 if synthesized).
    """

    kind: str
    text: str
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text})"

    def to_dict(self) -> dict[str, str | int]:
        return {"kind": self.kind, "text": self.text, "line": self.line, "col": self.col}


class Lexer:
    """Lexical analyzer for MinSwift.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips whitespace and `//` comments."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "/" and self.stream.peek(1) == "/":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator or punctuation at the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest spelling is "->"
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a number literal contains a second decimal point.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, "", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            if ident in token_hashmap:
                return Token(token_hashmap[ident], ident, line, col)
            return Token(IDENT, ident, line, col)

        # 2. Integer or floating literal
        if ch.isdigit():
            num = ""
            has_dot = False
            while not self.stream.end_of_file() and (
                self.peek().isdigit() or self.peek() == "."
            ):
                if self.peek() == ".":
                    if has_dot:
                        raise LexError("Invalid float format", line, col)
                    has_dot = True
                num += self.advance()
            return Token(FLOAT if has_dot else INTEGER, num, line, col)

        # 3. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character, left for the parser to reject
        logger.debug("unrecognized character %r at line %d, col %d", ch, line, col)
        return Token(ERROR, self.advance(), line, col)


def tokenize(source: str) -> list[Token]:
    """Lex `source` completely. The returned list always ends with an EOF token."""
    lexer = Lexer(CharacterStream(source))
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.kind == EOF:
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize", "token_hashmap"]
