"""
MinSwift Language Parser

Parses a finished MinSwift token list into an ordered list of top-level
function definitions.

This module implements a recursive-descent parser. Binary expressions are
resolved with operator-precedence climbing. The parser consumes tokens through
a `TokenCursor`, which never rewinds: every decision is made from the current
token and bounded lookahead before anything is consumed.

Supported Constructs
--------------------
- Expressions:
    * Number literals: `42`, `3.14`
    * Variables and calls: `x`, `f()`, `g(1, x + 2)`
    * Infix binary operators with precedence: `+ -` (20) below `* /` (40)
    * Parenthesized groups: `(1 + 2) * 3`
    * Return: `return`, `return x * 2`
    * Conditionals: `if c { a } else { b }`
    * Nested function definitions

- Declarations:
    * `func name(label var: Type, ...) -> Int { <expression> }`

- Top level:
    * Function definitions, and bare expressions wrapped as an implicit
      `func main() -> Int { <expression> }`

Parser Behavior
---------------
- Strict mode (default): the first error aborts the parse by raising a
  `ParseError` subclass. No partial AST is returned.
- Non-strict mode: an error inside one top-level construct is recorded in
  `Parser.diagnostics`, the cursor skips to the next `func` keyword, and the
  remaining constructs are parsed.

Entry Points
------------
- `Parser.parse()`: Parse a whole program.
- `Parser.parse_expression()`: Parse one expression.
- `Parser.parse_function_definition()`: Parse one `func` declaration.
- `parse_program(tokens)`: Module-level shortcut for `Parser(tokens).parse()`.

Raises
------
ParseError
    `UnexpectedToken`, `UnknownOperator`, `UnknownType`, `MalformedNumber`
    or `UnterminatedGroup`, each tagged with the offending line/column.
    `NestingTooDeep` when expressions nest past `MAX_NESTING_DEPTH`.
"""

from __future__ import annotations

import logging
import math
import re

from minswift.minswift_ast import (
    Argument,
    BinaryExpression,
    BinaryOperator,
    CallExpression,
    FunctionDefinition,
    IfElse,
    Node,
    NumberLiteral,
    ReturnStatement,
    ReturnType,
    VariableReference,
)
from minswift.minswift_constants import (
    ARROW,
    BINOP,
    COLON,
    COMMA,
    ELSE,
    EOF,
    FLOAT,
    FUNC,
    IDENT,
    IF,
    INTEGER,
    LBRACE,
    LPAREN,
    RBRACE,
    RETURN,
    RPAREN,
    expression_start_tokens,
)
from minswift.minswift_cursor import TokenCursor
from minswift.minswift_errors import (
    MalformedNumber,
    NestingTooDeep,
    ParseError,
    UnexpectedToken,
    UnknownOperator,
    UnknownType,
    UnterminatedGroup,
)
from minswift.minswift_lexer import Token

logger = logging.getLogger(__name__)

# LESS_THAN has no precedence; operator_precedence rejects it.
PRECEDENCE: dict[BinaryOperator, int] = {
    BinaryOperator.ADD: 20,
    BinaryOperator.SUBTRACT: 20,
    BinaryOperator.MULTIPLY: 40,
    BinaryOperator.DIVIDE: 40,
}

ENTRY_POINT_NAME = "main"

# Each nesting level costs several Python frames; deep input must fail with
# NestingTooDeep before it reaches the interpreter recursion limit.
MAX_NESTING_DEPTH = 100

_NUMBER_RE = re.compile(r"\d+(\.\d*)?([eE][+-]?\d+)?")


def extract_number_literal(token: Token) -> float | None:
    """Return the numeric value of a literal token, or None if it has none."""
    if token.kind not in (INTEGER, FLOAT):
        return None
    if not _NUMBER_RE.fullmatch(token.text):
        return None
    try:
        value = float(token.text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def extract_binary_operator(token: Token) -> BinaryOperator | None:
    """Return the operator a BINOP token spells, or None if it spells none."""
    if token.kind != BINOP:
        return None
    try:
        return BinaryOperator(token.text)
    except ValueError:
        return None


class Parser:
    """
    MinSwift Parser Class

    Turns a token list into `FunctionDefinition` nodes. All state lives on the
    instance, so independent parsers can run side by side.

    Attributes
    ----------
    cursor : TokenCursor
        Position tracker over the input tokens.
    strict : bool
        Raise on the first error (True) or record it and resynchronize (False).
    diagnostics : list[ParseError]
        Errors recorded in non-strict mode, in source order.
    max_depth : int
        Deepest expression nesting accepted before raising NestingTooDeep.

    Raises
    ------
    ParseError
        When an invalid construct or malformed syntax is encountered in strict mode.
    """

    def __init__(
        self,
        tokens: list[Token],
        strict: bool = True,
        max_depth: int = MAX_NESTING_DEPTH,
    ) -> None:
        self.cursor = TokenCursor(tokens)
        self.strict = strict
        self.max_depth = max_depth
        self.depth = 0
        self.diagnostics: list[ParseError] = []

    # Token stream helpers

    def current(self) -> Token:
        return self.cursor.current()

    def advance(self) -> Token:
        return self.cursor.read()

    def match(self, kind: str, expected: str | None = None) -> Token:
        """Consume a token of `kind` or raise UnexpectedToken naming `expected`."""
        tok = self.current()
        if tok.kind == kind:
            return self.advance()
        raise UnexpectedToken(expected or kind, tok)

    def close_group(self, kind: str, opener: Token) -> Token:
        """Consume the closer for `opener` or raise UnterminatedGroup."""
        tok = self.current()
        if tok.kind == kind:
            return self.advance()
        raise UnterminatedGroup(opener, tok)

    # Top level

    def parse(self) -> list[FunctionDefinition]:
        """Parse a full MinSwift program and return its top-level functions."""
        nodes: list[FunctionDefinition] = []
        while self.current().kind != EOF:
            start = self.cursor.position
            try:
                nodes.append(self.parse_top_level())
            except ParseError as e:
                if self.strict:
                    raise
                self.diagnostics.append(e)
                logger.warning("skipping malformed top-level construct: %s", e)
                self.synchronize(start)
        return nodes

    def parse_top_level(self) -> FunctionDefinition:
        if self.current().kind == FUNC:
            return self.parse_function_definition()
        return self.parse_top_level_expression()

    def parse_top_level_expression(self) -> FunctionDefinition:
        """Wrap a bare expression as an implicit `main` function."""
        tok = self.current()
        expr = self.parse_expression()
        if expr is None:
            raise UnexpectedToken("a function definition or expression", tok)
        logger.debug(
            "wrapped top-level expression at line %d, col %d as %s()",
            tok.line,
            tok.col,
            ENTRY_POINT_NAME,
        )
        return FunctionDefinition(
            ENTRY_POINT_NAME, (), ReturnType.INT, expr, line=tok.line, col=tok.col
        )

    def synchronize(self, start: int) -> None:
        """Skip ahead to the next `func` keyword or EOF after an error."""
        if self.cursor.position == start and not self.cursor.at_end():
            self.advance()
        while self.current().kind not in (FUNC, EOF):
            self.advance()

    # Expressions

    def parse_expression(self) -> Node | None:
        """Parse a primary followed by any binary operators.

        Returns None only when positioned at end of input.
        """
        lhs = self.parse_primary()
        if lhs is None:
            return None
        return self.parse_binary_operator_rhs(0, lhs)

    def parse_primary(self) -> Node | None:
        tok = self.current()
        if self.depth >= self.max_depth:
            raise NestingTooDeep(tok, self.max_depth)
        self.depth += 1
        try:
            return self.dispatch_primary(tok)
        finally:
            self.depth -= 1

    def dispatch_primary(self, tok: Token) -> Node | None:
        if tok.kind == IDENT:
            return self.parse_identifier_expression()
        if tok.kind in (INTEGER, FLOAT):
            return self.parse_number()
        if tok.kind == LPAREN:
            return self.parse_paren()
        if tok.kind == FUNC:
            return self.parse_function_definition()
        if tok.kind == RETURN:
            return self.parse_return()
        if tok.kind == IF:
            return self.parse_if_else()
        if tok.kind == EOF:
            return None
        raise UnexpectedToken("an expression", tok)

    def parse_number(self) -> NumberLiteral:
        tok = self.current()
        if tok.kind not in (INTEGER, FLOAT):
            raise UnexpectedToken("a number literal", tok)
        value = extract_number_literal(tok)
        if value is None:
            raise MalformedNumber(tok)
        self.advance()
        return NumberLiteral(value, line=tok.line, col=tok.col)

    def parse_identifier_expression(self) -> VariableReference | CallExpression:
        """Parse a variable reference, or a call when the name is followed by '('."""
        name_tok = self.match(IDENT, "an identifier")
        if self.current().kind != LPAREN:
            return VariableReference(
                name_tok.text, line=name_tok.line, col=name_tok.col
            )

        opener = self.advance()
        arguments: list[Node] = []
        if self.current().kind != RPAREN:
            while True:
                if self.current().kind == EOF:
                    raise UnterminatedGroup(opener, self.current())
                arg = self.parse_expression()
                assert arg is not None  # for mypy, EOF handled above
                arguments.append(arg)
                if self.current().kind != COMMA:
                    break
                self.advance()
        self.close_group(RPAREN, opener)
        return CallExpression(
            name_tok.text, tuple(arguments), line=name_tok.line, col=name_tok.col
        )

    def operator_precedence(self, tok: Token) -> int:
        """Precedence of `tok` as a binary operator, or -1 if it is not one.

        Raises:
            UnknownOperator: If `tok` is an operator with no defined precedence.
        """
        if tok.kind != BINOP:
            return -1
        op = extract_binary_operator(tok)
        if op is None:
            raise UnknownOperator(tok)
        precedence = PRECEDENCE.get(op)
        if precedence is None:
            raise UnknownOperator(tok, "has no defined precedence")
        return precedence

    def parse_binary_operator_rhs(self, min_precedence: int, lhs: Node) -> Node:
        """Fold `op primary` pairs onto `lhs` by precedence climbing.

        Stops at the first token that is not an operator or binds looser than
        `min_precedence`, leaving that token unconsumed.
        """
        while True:
            op_tok = self.current()
            precedence = self.operator_precedence(op_tok)
            if precedence < min_precedence:
                return lhs

            self.advance()
            op = extract_binary_operator(op_tok)
            assert op is not None  # for mypy, validated by operator_precedence
            rhs = self.parse_primary()
            if rhs is None:
                raise UnexpectedToken(
                    f"an operand after {op_tok.text!r}", self.current()
                )

            # A tighter operator after rhs takes rhs as its own left operand first.
            if precedence < self.operator_precedence(self.current()):
                rhs = self.parse_binary_operator_rhs(precedence + 1, rhs)

            lhs = BinaryExpression(op, lhs, rhs, line=lhs.line, col=lhs.col)

    def parse_paren(self) -> Node:
        opener = self.match(LPAREN, "'('")
        if self.current().kind == EOF:
            raise UnterminatedGroup(opener, self.current())
        if self.current().kind == RPAREN:
            raise UnexpectedToken("an expression inside '()'", self.current())
        expr = self.parse_expression()
        assert expr is not None  # for mypy
        self.close_group(RPAREN, opener)
        return expr

    def parse_return(self) -> ReturnStatement:
        """Parse `return` with an optional value."""
        tok = self.match(RETURN, "'return'")
        if self.current().kind not in expression_start_tokens:
            return ReturnStatement(None, line=tok.line, col=tok.col)
        body = self.parse_expression()
        return ReturnStatement(body, line=tok.line, col=tok.col)

    def parse_if_else(self) -> IfElse:
        """Parse `if <cond> { <expr> } else { <expr> }`; the else arm is required."""
        if_tok = self.match(IF, "'if'")
        if self.current().kind not in expression_start_tokens:
            raise UnexpectedToken("a condition after 'if'", self.current())
        condition = self.parse_expression()
        assert condition is not None  # for mypy

        then_branch = self.parse_braced_expression("'{' after if condition")
        self.match(ELSE, "'else' after if body")
        else_branch = self.parse_braced_expression("'{' after 'else'")

        return IfElse(
            condition, then_branch, else_branch, line=if_tok.line, col=if_tok.col
        )

    def parse_braced_expression(self, expected: str) -> Node:
        """Parse `{ <expression> }` as used by function bodies and if/else arms."""
        opener = self.match(LBRACE, expected)
        if self.current().kind == EOF:
            raise UnterminatedGroup(opener, self.current())
        if self.current().kind == RBRACE:
            raise UnexpectedToken("an expression inside '{}'", self.current())
        expr = self.parse_expression()
        assert expr is not None  # for mypy
        self.close_group(RBRACE, opener)
        return expr

    # Declarations

    def parse_function_definition(self) -> FunctionDefinition:
        """Parse `func name(params) -> Type { <expression> }`."""
        func_tok = self.match(FUNC, "'func'")
        name_tok = self.match(IDENT, "a function name after 'func'")
        self.match(LPAREN, "'(' after function name")

        arguments: list[Argument] = []
        if self.current().kind != RPAREN:
            while True:
                arguments.append(self.parse_function_argument())
                if self.current().kind != COMMA:
                    break
                self.advance()
        self.match(RPAREN, "')' after parameter list")

        self.match(ARROW, "'->' after parameter list")
        type_tok = self.match(IDENT, "a return type after '->'")
        return_type = self.lookup_return_type(type_tok)

        body = self.parse_braced_expression("'{' before function body")

        logger.debug(
            "parsed function %r with %d argument(s) at line %d",
            name_tok.text,
            len(arguments),
            func_tok.line,
        )
        return FunctionDefinition(
            name_tok.text,
            tuple(arguments),
            return_type,
            body,
            line=func_tok.line,
            col=func_tok.col,
        )

    def parse_function_argument(self) -> Argument:
        """Parse `label [variable_name]: TypeName`."""
        label_tok = self.match(IDENT, "a parameter name")
        name_tok = label_tok
        if self.current().kind == IDENT:
            name_tok = self.advance()
        self.match(COLON, "':' after parameter name")
        type_tok = self.match(IDENT, "a parameter type after ':'")
        return Argument(label_tok.text, name_tok.text, type_tok.text)

    def lookup_return_type(self, tok: Token) -> ReturnType:
        try:
            return ReturnType(tok.text)
        except ValueError:
            raise UnknownType(tok) from None


def parse_program(tokens: list[Token], strict: bool = True) -> list[FunctionDefinition]:
    """Parse `tokens` as a whole program. See `Parser.parse`."""
    return Parser(tokens, strict=strict).parse()


__all__ = [
    "PRECEDENCE",
    "Parser",
    "extract_binary_operator",
    "extract_number_literal",
    "parse_program",
]
