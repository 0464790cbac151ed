"""
Error taxonomy for the MinSwift front end.

Every failure raised by the lexer or parser derives from `SyntaxError`, so callers
that only care about "the program is malformed" can catch that single type.
Each error carries the 1-based line/column of the offending token.

Classes:
    LexError: Raised by the lexer for malformed character sequences.
    ParseError: Base class for everything the parser raises.
    UnexpectedToken: A grammar position required one token kind, another was found.
    UnknownOperator: Operator text has no mapped meaning or precedence.
    UnknownType: A type name is not one of the supported return types.
    MalformedNumber: Literal text does not convert to a number.
    UnterminatedGroup: A parenthesized or braced construct is missing its closer.
    NestingTooDeep: Expressions nest deeper than the parser allows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from minswift.minswift_lexer import Token


def _describe(tok: Token) -> str:
    if tok.kind == "EOF":
        return "end of input"
    return f"{tok.kind} {tok.text!r}"


class LexError(SyntaxError):
    """Raised when the lexer cannot form a token from the source text."""

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"{message} at line {line}, col {col}")
        self.message = message
        self.line = line
        self.col = col


class ParseError(SyntaxError):
    """Base class for all parser failures.

    Attributes:
        message (str): Human readable description without location.
        line (int): 1-based line of the offending token (0 if unknown).
        col (int): 1-based column of the offending token (0 if unknown).
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"{message} at line {line}, col {col}")
        self.message = message
        self.line = line
        self.col = col


class UnexpectedToken(ParseError):
    def __init__(self, expected: str, found: Token) -> None:
        super().__init__(
            f"Expected {expected}, got {_describe(found)}", found.line, found.col
        )
        self.expected = expected
        self.found = found


class UnknownOperator(ParseError):
    def __init__(self, token: Token, reason: str = "is not a known operator") -> None:
        super().__init__(f"Operator {token.text!r} {reason}", token.line, token.col)
        self.token = token


class UnknownType(ParseError):
    def __init__(self, token: Token) -> None:
        super().__init__(f"Unknown type {token.text!r}", token.line, token.col)
        self.token = token


class MalformedNumber(ParseError):
    def __init__(self, token: Token) -> None:
        super().__init__(
            f"Malformed number literal {token.text!r}", token.line, token.col
        )
        self.token = token


class UnterminatedGroup(ParseError):
    """Raised when an opening '(' or '{' is never closed.

    The reported location is where the closer was expected; the opener is kept
    on the exception for diagnostics.
    """

    def __init__(self, opener: Token, found: Token) -> None:
        closer = ")" if opener.text == "(" else "}"
        super().__init__(
            f"Unterminated {opener.text!r} opened at line {opener.line}, "
            f"col {opener.col}: expected {closer!r}, got {_describe(found)}",
            found.line,
            found.col,
        )
        self.opener = opener
        self.found = found


class NestingTooDeep(ParseError):
    def __init__(self, token: Token, limit: int) -> None:
        super().__init__(
            f"Expression nested too deeply (limit {limit})", token.line, token.col
        )
        self.token = token
        self.limit = limit


__all__ = [
    "LexError",
    "ParseError",
    "UnexpectedToken",
    "UnknownOperator",
    "UnknownType",
    "MalformedNumber",
    "UnterminatedGroup",
    "NestingTooDeep",
]
