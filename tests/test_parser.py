from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.strategies import composite

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
    walk,
)
from minswift.minswift_errors import (
    MalformedNumber,
    NestingTooDeep,
    ParseError,
    UnexpectedToken,
    UnknownOperator,
    UnknownType,
    UnterminatedGroup,
)
from minswift.minswift_lexer import Token, tokenize
from minswift.minswift_parser import (
    Parser,
    extract_binary_operator,
    extract_number_literal,
    parse_program,
)

ADD = BinaryOperator.ADD
SUB = BinaryOperator.SUBTRACT
MUL = BinaryOperator.MULTIPLY
DIV = BinaryOperator.DIVIDE

OPERATORS = {"+": ADD, "-": SUB, "*": MUL, "/": DIV}


def parse(source: str) -> list[FunctionDefinition]:
    return Parser(tokenize(source)).parse()


def parse_expr(source: str) -> Node | None:
    return Parser(tokenize(source)).parse_expression()


def make_tokens(*types_vals: tuple[str, str]) -> list[Token]:
    return [Token(t, v) for t, v in types_vals] + [Token("EOF", "")]


def num(value: float) -> NumberLiteral:
    return NumberLiteral(value)


def var(name: str) -> VariableReference:
    return VariableReference(name)


def main(body: Node) -> FunctionDefinition:
    return FunctionDefinition("main", (), ReturnType.INT, body)


# Expression structure


def test_equal_precedence_associates_left() -> None:
    assert parse_expr("1 - 2 - 3") == BinaryExpression(
        SUB, BinaryExpression(SUB, num(1), num(2)), num(3)
    )


def test_multiplication_binds_tighter() -> None:
    assert parse_expr("1 + 2 * 3") == BinaryExpression(
        ADD, num(1), BinaryExpression(MUL, num(2), num(3))
    )


def test_grouping_overrides_precedence() -> None:
    assert parse_expr("(1 + 2) * 3") == BinaryExpression(
        MUL, BinaryExpression(ADD, num(1), num(2)), num(3)
    )


def test_mixed_chain() -> None:
    assert parse_expr("a * b + c / d - e") == BinaryExpression(
        SUB,
        BinaryExpression(
            ADD,
            BinaryExpression(MUL, var("a"), var("b")),
            BinaryExpression(DIV, var("c"), var("d")),
        ),
        var("e"),
    )


def test_tight_run_inside_loose_chain() -> None:
    assert parse_expr("1 + 2 * 3 * 4 - 5") == BinaryExpression(
        SUB,
        BinaryExpression(
            ADD,
            num(1),
            BinaryExpression(MUL, BinaryExpression(MUL, num(2), num(3)), num(4)),
        ),
        num(5),
    )


@pytest.mark.parametrize(
    "text,expected",
    [("3.14", 3.14), ("42", 42.0), ("0", 0.0), ("7.", 7.0)],
)  # type: ignore[misc]
def test_number_literals(text: str, expected: float) -> None:
    node = parse_expr(text)
    assert isinstance(node, NumberLiteral)
    assert node.value == expected
    assert isinstance(node.value, float)


def test_variable_reference() -> None:
    assert parse_expr("x") == var("x")


def test_zero_argument_call() -> None:
    assert parse_expr("f()") == CallExpression("f", ())


def test_call_with_arguments() -> None:
    assert parse_expr("g(1, x + 2, h())") == CallExpression(
        "g", (num(1), BinaryExpression(ADD, var("x"), num(2)), CallExpression("h", ()))
    )


def test_call_as_operand() -> None:
    assert parse_expr("f() * 2") == BinaryExpression(
        MUL, CallExpression("f", ()), num(2)
    )


def test_nested_parentheses() -> None:
    assert parse_expr("((x))") == var("x")


def test_return_with_value() -> None:
    assert parse_expr("return 1 + 2") == ReturnStatement(
        BinaryExpression(ADD, num(1), num(2))
    )


def test_return_without_value_at_end() -> None:
    assert parse_expr("return") == ReturnStatement(None)


def test_nested_return() -> None:
    assert parse_expr("return return 1") == ReturnStatement(ReturnStatement(num(1)))


def test_nested_return_in_body() -> None:
    fn = parse("func f() -> Int { return return 1 }")[0]
    assert fn.body == ReturnStatement(ReturnStatement(num(1)))


def test_nested_return_at_top_level_is_one_main() -> None:
    assert parse("return return 1") == [main(ReturnStatement(ReturnStatement(num(1))))]


def test_return_without_value_before_brace() -> None:
    fn = parse("func f() -> Void { return }")[0]
    assert fn.body == ReturnStatement(None)
    assert fn.return_type is ReturnType.VOID


def test_if_else_expression() -> None:
    assert parse_expr("if c { 1 } else { f() }") == IfElse(
        var("c"), num(1), CallExpression("f", ())
    )


def test_if_else_as_function_body() -> None:
    fn = parse("func pick(c: Int) -> Int { if c { c * 2 } else { 0 } }")[0]
    assert fn.body == IfElse(var("c"), BinaryExpression(MUL, var("c"), num(2)), num(0))


def test_if_without_else_raises() -> None:
    with pytest.raises(UnexpectedToken, match="'else' after if body"):
        parse("if c { 1 }")


def test_if_without_condition_raises() -> None:
    with pytest.raises(UnexpectedToken, match="a condition after 'if'"):
        parse("if { 1 } else { 2 }")


def test_end_of_input_is_no_expression() -> None:
    assert Parser([]).parse_expression() is None


# Declarations


def test_function_definition() -> None:
    result = parse("func add(a: Int, b: Int) -> Int { a + b }")
    assert result == [
        FunctionDefinition(
            "add",
            (Argument("a", "a"), Argument("b", "b")),
            ReturnType.INT,
            BinaryExpression(ADD, var("a"), var("b")),
        )
    ]


def test_parameter_types_are_kept() -> None:
    fn = parse("func add(a: Int, b: Double) -> Double { a + b }")[0]
    assert [a.type_name for a in fn.arguments] == ["Int", "Double"]
    assert fn.return_type is ReturnType.DOUBLE


def test_labelled_parameter() -> None:
    fn = parse("func scale(by factor: Int) -> Int { factor * 2 }")[0]
    assert fn.arguments == (Argument("by", "factor", "Int"),)


def test_function_without_parameters() -> None:
    assert parse("func one() -> Int { 1 }") == [
        FunctionDefinition("one", (), ReturnType.INT, num(1))
    ]


def test_nested_function_definition_in_body() -> None:
    fn = parse("func outer() -> Int { func inner() -> Int { 1 } }")[0]
    assert fn.body == FunctionDefinition("inner", (), ReturnType.INT, num(1))


def test_definition_records_position() -> None:
    fn = parse("\n  func f() -> Int { 1 }")[0]
    assert (fn.line, fn.col) == (2, 3)


def test_unknown_return_type() -> None:
    with pytest.raises(UnknownType, match="Unknown type 'String'") as exc:
        parse("func f() -> String { 1 }")
    assert (exc.value.line, exc.value.col) == (1, 13)


def test_missing_arrow() -> None:
    with pytest.raises(
        UnexpectedToken, match=r"Expected '->' after parameter list, got LBRACE '\{'"
    ):
        parse("func f() { 1 }")


@pytest.mark.parametrize(
    "source,expected",
    [
        ("func (a: Int) -> Int { a }", "a function name"),
        ("func f a: Int) -> Int { a }", "'\\(' after function name"),
        ("func f(a Int) -> Int { a }", "':' after parameter name"),
        ("func f(a: Int b: Int) -> Int { a }", "'\\)' after parameter list"),
        ("func f(a:) -> Int { a }", "a parameter type"),
        ("func f(a: Int,) -> Int { a }", "a parameter name"),
        ("func f() -> { 1 }", "a return type"),
        ("func f() -> Int 1", "'\\{' before function body"),
        ("func f() -> Int { }", "an expression inside"),
    ],
)  # type: ignore[misc]
def test_declaration_errors(source: str, expected: str) -> None:
    with pytest.raises(UnexpectedToken, match=expected):
        parse(source)


def test_unclosed_body_at_end_of_input() -> None:
    with pytest.raises(UnterminatedGroup, match="expected '}', got end of input"):
        parse("func f() -> Int { 1")


def test_multiple_statements_in_body_rejected() -> None:
    with pytest.raises(UnterminatedGroup):
        parse("func f() -> Int { 1 2 }")


# Top level


def test_bare_expression_is_wrapped_as_main() -> None:
    assert parse("1 + 2") == [main(BinaryExpression(ADD, num(1), num(2)))]


def test_program_order_is_preserved() -> None:
    result = parse("func f() -> Int { 1 }\nf()\nfunc g() -> Int { 2 }")
    assert [fn.name for fn in result] == ["f", "main", "g"]
    assert result[1].body == CallExpression("f", ())


def test_empty_program() -> None:
    assert parse("") == []
    assert parse("// nothing here") == []


def test_parse_program_helper() -> None:
    assert parse_program(tokenize("x")) == [main(var("x"))]


def test_tokens_without_eof_marker() -> None:
    tokens = [Token("INTEGER", "1"), Token("BINOP", "+"), Token("INTEGER", "2")]
    assert Parser(tokens).parse() == [main(BinaryExpression(ADD, num(1), num(2)))]


def test_stray_token_at_top_level_is_an_error() -> None:
    with pytest.raises(UnexpectedToken, match="Expected an expression, got RPAREN"):
        parse(")")


def test_unknown_character_is_rejected() -> None:
    with pytest.raises(UnexpectedToken, match="ERROR '@'"):
        parse("1 + @")


def test_independent_parsers() -> None:
    first = Parser(tokenize("1 + 2"))
    second = Parser(tokenize("3 * 4"))
    assert second.parse() == [main(BinaryExpression(MUL, num(3), num(4)))]
    assert first.parse() == [main(BinaryExpression(ADD, num(1), num(2)))]


def test_nodes_are_not_shared() -> None:
    fn = parse("func f(a: Int) -> Int { a * a + g(a, a) }")[0]
    nodes = list(walk(fn))
    assert len({id(n) for n in nodes}) == len(nodes)


# Errors


def test_unclosed_group() -> None:
    parser = Parser(tokenize("(1 + 2"))
    with pytest.raises(UnterminatedGroup):
        parser.parse_expression()


def test_unclosed_group_reports_both_positions() -> None:
    with pytest.raises(UnterminatedGroup) as exc:
        parse("func f() -> Int {\n  (1 + 2\n}")
    err = exc.value
    assert (err.line, err.col) == (3, 1)
    assert (err.opener.line, err.opener.col) == (2, 3)
    assert "opened at line 2, col 3" in str(err)


def test_unclosed_call() -> None:
    with pytest.raises(UnterminatedGroup):
        parse("f(1, 2")


def test_call_trailing_comma() -> None:
    with pytest.raises(UnexpectedToken, match="Expected an expression, got RPAREN"):
        parse("f(1,)")


def test_empty_group() -> None:
    with pytest.raises(UnexpectedToken, match=r"inside '\(\)'"):
        parse("()")


def test_missing_operand() -> None:
    with pytest.raises(UnexpectedToken, match="an operand after '\\+'"):
        parse("1 +")


def test_less_than_has_no_precedence() -> None:
    with pytest.raises(UnknownOperator, match="has no defined precedence"):
        parse("a < b")


def test_unmapped_operator_text() -> None:
    tokens = make_tokens(("IDENT", "a"), ("BINOP", "%"), ("IDENT", "b"))
    with pytest.raises(UnknownOperator, match="'%' is not a known operator"):
        Parser(tokens).parse()


def test_malformed_number() -> None:
    tokens = make_tokens(("INTEGER", "12abc"))
    with pytest.raises(MalformedNumber, match="'12abc'"):
        Parser(tokens).parse()


@pytest.mark.parametrize(
    "text", ["1_000", " 42 ", "+1", "inf", "nan"]
)  # type: ignore[misc]
def test_number_text_outside_literal_grammar(text: str) -> None:
    with pytest.raises(MalformedNumber):
        Parser(make_tokens(("INTEGER", text))).parse()


def test_parse_number_requires_literal() -> None:
    with pytest.raises(UnexpectedToken, match="a number literal"):
        Parser(make_tokens(("IDENT", "x"))).parse_number()


def test_deep_nesting_raises_located_error() -> None:
    source = "(" * 2000 + "1" + ")" * 2000
    with pytest.raises(NestingTooDeep, match="nested too deeply") as exc:
        parse(source)
    assert (exc.value.line, exc.value.col) == (1, 101)


def test_nesting_below_limit_parses() -> None:
    assert parse_expr("(" * 50 + "1" + ")" * 50) == num(1)


def test_nesting_limit_is_configurable() -> None:
    with pytest.raises(NestingTooDeep, match="limit 3"):
        Parser(tokenize("return return return 1"), max_depth=3).parse()
    assert Parser(tokenize("return return 1"), max_depth=3).parse() == [
        main(ReturnStatement(ReturnStatement(num(1))))
    ]


def test_deep_nesting_in_function_bodies() -> None:
    source = "func f() -> Int { " * 300 + "1" + " }" * 300
    with pytest.raises(NestingTooDeep):
        parse(source)


def test_errors_are_syntax_errors() -> None:
    with pytest.raises(SyntaxError):
        parse("func")
    assert issubclass(ParseError, SyntaxError)


# Non-strict recovery


def test_non_strict_records_and_resynchronizes() -> None:
    source = "func f( -> Int { 1 }\nfunc g() -> Int { 2 }\n3"
    parser = Parser(tokenize(source), strict=False)
    result = parser.parse()
    assert [fn.name for fn in result] == ["g", "main"]
    assert len(parser.diagnostics) == 1
    assert isinstance(parser.diagnostics[0], UnexpectedToken)


def test_non_strict_skips_stray_leading_tokens() -> None:
    parser = Parser(tokenize(") 1 func g() -> Int { 2 }"), strict=False)
    assert parser.parse() == [FunctionDefinition("g", (), ReturnType.INT, num(2))]
    assert [d.line for d in parser.diagnostics] == [1]


def test_non_strict_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING", logger="minswift.minswift_parser"):
        parse_program(tokenize("func"), strict=False)
    assert "skipping malformed top-level construct" in caplog.text


def test_non_strict_records_deep_nesting() -> None:
    source = "(" * 2000 + "1" + ")" * 2000 + "\nfunc g() -> Int { 2 }"
    parser = Parser(tokenize(source), strict=False)
    assert [fn.name for fn in parser.parse()] == ["g"]
    assert isinstance(parser.diagnostics[0], NestingTooDeep)
    assert parser.depth == 0


def test_non_strict_clean_input_has_no_diagnostics() -> None:
    parser = Parser(tokenize("func f() -> Int { 1 }"), strict=False)
    assert len(parser.parse()) == 1
    assert parser.diagnostics == []


# Classification helpers


def test_extract_binary_operator() -> None:
    assert extract_binary_operator(Token("BINOP", "*")) is MUL
    assert extract_binary_operator(Token("BINOP", "<")) is BinaryOperator.LESS_THAN
    assert extract_binary_operator(Token("BINOP", "%")) is None
    assert extract_binary_operator(Token("IDENT", "+")) is None


def test_extract_number_literal() -> None:
    assert extract_number_literal(Token("INTEGER", "42")) == 42.0
    assert extract_number_literal(Token("FLOAT", "2.5")) == 2.5
    assert extract_number_literal(Token("FLOAT", "1e400")) is None
    assert extract_number_literal(Token("IDENT", "42")) is None
    assert extract_number_literal(Token("FLOAT", "1e3")) == 1000.0
    assert extract_number_literal(Token("FLOAT", "2.5E-1")) == 0.25
    assert extract_number_literal(Token("INTEGER", "1_000")) is None


# Precedence climbing against a reference parenthesization


@composite  # type: ignore[misc]
def flat_expression(draw: Any) -> tuple[list[int], list[str]]:
    operands = draw(
        st.lists(st.integers(min_value=0, max_value=99), min_size=1, max_size=10)
    )
    ops = draw(
        st.lists(
            st.sampled_from(sorted(OPERATORS)),
            min_size=len(operands) - 1,
            max_size=len(operands) - 1,
        )
    )
    return operands, ops


def reference_tree(operands: list[int], ops: list[str]) -> Node:
    """Group each run of * and / first, then fold + and - left to right."""
    terms: list[Node] = [num(operands[0])]
    additive: list[str] = []
    for op, n in zip(ops, operands[1:]):
        if op in ("*", "/"):
            terms[-1] = BinaryExpression(OPERATORS[op], terms[-1], num(n))
        else:
            additive.append(op)
            terms.append(num(n))
    tree = terms[0]
    for op, term in zip(additive, terms[1:]):
        tree = BinaryExpression(OPERATORS[op], tree, term)
    return tree


def fully_parenthesize(node: Node) -> str:
    if isinstance(node, BinaryExpression):
        lhs = fully_parenthesize(node.lhs)
        rhs = fully_parenthesize(node.rhs)
        return f"({lhs} {node.operator.value} {rhs})"
    assert isinstance(node, NumberLiteral)
    return str(int(node.value))


@given(expr=flat_expression())  # type: ignore[misc]
def test_precedence_climbing_matches_reference(
    expr: tuple[list[int], list[str]],
) -> None:
    operands, ops = expr
    tokens = [Token("INTEGER", str(operands[0]))]
    for op, n in zip(ops, operands[1:]):
        tokens += [Token("BINOP", op), Token("INTEGER", str(n))]
    tokens.append(Token("EOF", ""))

    expected = reference_tree(operands, ops)
    assert Parser(tokens).parse_expression() == expected
    assert parse_expr(fully_parenthesize(expected)) == expected


@given(expr=flat_expression())  # type: ignore[misc]
def test_flat_source_wraps_into_single_main(
    expr: tuple[list[int], list[str]],
) -> None:
    operands, ops = expr
    tail = "".join(f" {op} {n}" for op, n in zip(ops, operands[1:]))
    source = str(operands[0]) + tail
    assert parse(source) == [main(reference_tree(operands, ops))]
