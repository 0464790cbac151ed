"""
Sequential reader over a finished token list.

`TokenCursor` plays the same role for tokens that `CharacterStream` plays for
characters in the lexer: it tracks a single position, hands out the current
token, and offers bounded lookahead. It never rewinds; every grammar decision
is made from the current token plus lookahead before anything is consumed.
"""

from minswift.minswift_constants import EOF, token_kinds
from minswift.minswift_lexer import Token


class TokenCursor:
    """
    Attributes:
        tokens (list[Token]): The token list, always terminated by an EOF token.
        position (int): Index of the current token.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        for tok in self.tokens:
            if tok.kind not in token_kinds:
                raise ValueError(f"Unknown token kind {tok.kind!r} in {tok!r}")
        if not self.tokens or self.tokens[-1].kind != EOF:
            last = self.tokens[-1] if self.tokens else None
            line = last.line if last else 0
            col = last.col + len(last.text) if last else 0
            self.tokens.append(Token(EOF, "", line, col))
        self.position: int = 0

    def current(self) -> Token:
        return self.tokens[self.position]

    def peek(self, n: int = 0) -> Token:
        """Return the token `n` positions past the current one without consuming.

        Lookahead beyond the end yields the trailing EOF token.

        Raises:
            ValueError: If `n` is negative; the cursor never looks back.
        """
        if n < 0:
            raise ValueError(f"lookahead must be non-negative, got {n}")
        index = self.position + n
        if index >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[index]

    def read(self) -> Token:
        """Consume the current token and return it.

        Raises:
            IndexError: If the cursor is already positioned on EOF. Grammar
                functions must check for EOF before consuming.
        """
        tok = self.tokens[self.position]
        if tok.kind == EOF:
            raise IndexError(
                f"Attempted to read past end of input at line {tok.line}, col {tok.col}"
            )
        self.position += 1
        return tok

    def at_end(self) -> bool:
        return self.current().kind == EOF


__all__ = ["TokenCursor"]
