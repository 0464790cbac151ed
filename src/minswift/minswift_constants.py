"""
Shared token vocabulary for the MinSwift lexer and parser.

Token kinds are plain strings so they can be written directly in test fixtures
(`Token("IDENT", "x")`). The full set is closed: the lexer never emits a kind
outside `token_kinds`.

Exports:
    token_kinds: Every token kind the lexer can produce.
    token_hashmap: Keyword and punctuation spellings mapped to their token kind.
    expression_start_tokens: Kinds that may begin a primary expression.
"""

IDENT = "IDENT"
INTEGER = "INTEGER"
FLOAT = "FLOAT"
BINOP = "BINOP"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
COLON = "COLON"
ARROW = "ARROW"
COMMA = "COMMA"
FUNC = "FUNC"
RETURN = "RETURN"
IF = "IF"
ELSE = "ELSE"
ERROR = "ERROR"
EOF = "EOF"

token_kinds: frozenset[str] = frozenset(
    {
        IDENT,
        INTEGER,
        FLOAT,
        BINOP,
        LPAREN,
        RPAREN,
        LBRACE,
        RBRACE,
        COLON,
        ARROW,
        COMMA,
        FUNC,
        RETURN,
        IF,
        ELSE,
        ERROR,
        EOF,
    }
)

# Longest match wins in the lexer, so "->" beats "-".
token_hashmap: dict[str, str] = {
    # Keywords
    "func": FUNC,
    "return": RETURN,
    "if": IF,
    "else": ELSE,
    # Binary operators
    "+": BINOP,
    "-": BINOP,
    "*": BINOP,
    "/": BINOP,
    "<": BINOP,
    # Punctuation
    "->": ARROW,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    ":": COLON,
    ",": COMMA,
}

keywords: frozenset[str] = frozenset(k for k in token_hashmap if k.isalpha())

expression_start_tokens: frozenset[str] = frozenset(
    {IDENT, INTEGER, FLOAT, LPAREN, FUNC, RETURN, IF}
)

__all__ = [
    "token_kinds",
    "token_hashmap",
    "keywords",
    "expression_start_tokens",
]
