import pytest

from parametrizer.config import ParserConfig
from parametrizer.errors import (
    EmptyExpression, NestingTooDeep, UnexpectedToken, UnknownFunction, UnmatchedParenthesis
)
from parametrizer.functions import ParametrizerFunction, build_function_table
from parametrizer.parser import END_OF_INPUT, parse, parse_string
from parametrizer.term import (
    BinaryOpTerm, ConstantTerm, FunctionTerm, OpType, ParameterTerm, PiecewiseTerm, UnaryFuncTerm
)
from parametrizer.tokenizer import tokenize


def test_precedence_builds_expected_tree():
    root = parse_string("2+3*4")
    assert isinstance(root, BinaryOpTerm)
    assert root.operator == OpType.ADD
    assert root.left == ConstantTerm(2)
    assert root.right == BinaryOpTerm(OpType.MUL, ConstantTerm(3), ConstantTerm(4))
    assert root.evaluate(0.0) == 14.0


def test_power_is_right_associative():
    root = parse_string("2^3^2")
    assert root.operator == OpType.POW
    assert root.left == ConstantTerm(2)
    assert isinstance(root.right, BinaryOpTerm) and root.right.operator == OpType.POW
    assert root.evaluate(0.0) == 512.0


@pytest.mark.parametrize("text, expected", [
    ("1-2-3", -4.0),
    ("8/4/2", 1.0),
    ("(2+3)*4", 20.0),
    ("2*3+4*5", 26.0),
    ("2^3*2", 16.0),
    ("2^-1", 0.5),
    ("-2^2", 4.0),
    ("--3", 3.0),
    ("-(1+2)*2", -6.0),
    ("1+-1", 0.0),
])
def test_arithmetic(text, expected):
    assert parse_string(text).evaluate(0.0) == expected


def test_unary_minus_is_negation():
    root = parse_string("-t")
    assert root == UnaryFuncTerm(OpType.NEG, ParameterTerm())
    assert root.evaluate(9.0) == -9.0


def test_function_call_and_log_alias():
    assert parse_string("sqrt(t)") == UnaryFuncTerm(OpType.SQRT, ParameterTerm())
    assert parse_string("log(t)") == parse_string("ln(t)")


def test_user_function_takes_precedence():
    table = build_function_table([ParametrizerFunction("sin", lambda x: 42.0)])
    root = parse_string("sin(t)", table)
    assert isinstance(root, FunctionTerm)
    assert root.evaluate(1.0) == 42.0


def test_defaults_can_be_disabled():
    config = ParserConfig(include_default_functions=False)
    with pytest.raises(UnknownFunction):
        parse_string("sin(t)", config=config)


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_empty_expression(text):
    with pytest.raises(EmptyExpression):
        parse_string(text)


def test_empty_token_list():
    with pytest.raises(EmptyExpression):
        parse([])


@pytest.mark.parametrize("text", ["(1+2", "((t)", "sin(t", "(", "2*(3+(4)", "(1+"])
def test_unmatched_parenthesis(text):
    with pytest.raises(UnmatchedParenthesis):
        parse_string(text)


@pytest.mark.parametrize("text, token", [
    ("1+2)", "')'"),
    ("1 2", "'2'"),
    ("2t", "'t'"),
    ("2(t+1)", "'('"),
    ("()", "')'"),
    ("*2", "'*'"),
    ("1>2", "'>'"),
    ("1|2", "'|'"),
    ("(1 2)", "'2'"),
])
def test_unexpected_token(text, token):
    with pytest.raises(UnexpectedToken) as info:
        parse_string(text)
    assert info.value.token == token


@pytest.mark.parametrize("text", ["1+", "2*", "-", "2^"])
def test_premature_end_is_unexpected_token(text):
    with pytest.raises(UnexpectedToken) as info:
        parse_string(text)
    assert info.value.token == END_OF_INPUT


def test_unknown_function():
    with pytest.raises(UnknownFunction) as info:
        parse_string("1 + foo(1)")
    assert info.value.name == "foo"
    assert info.value.position == 4


def test_error_reports_position():
    with pytest.raises(UnexpectedToken) as info:
        parse_string("1 2")
    assert info.value.position == 2


def test_nesting_limit():
    deep = "(" * 30 + "t" + ")" * 30
    assert parse_string(deep).evaluate(2.0) == 2.0

    with pytest.raises(NestingTooDeep):
        parse_string("(" * 100 + "t" + ")" * 100)
    with pytest.raises(NestingTooDeep):
        parse_string("-" * 100 + "t")
    with pytest.raises(NestingTooDeep):
        parse_string("^".join(["2"] * 100))

    with pytest.raises(NestingTooDeep):
        parse_string("((t))", config=ParserConfig(max_depth=1))


def test_operator_chains_count_towards_nesting():
    chain = "+".join(["t"] * 400)
    assert parse_string(chain).evaluate(0.5) == 200.0

    with pytest.raises(NestingTooDeep):
        parse_string("+".join(["t"] * 600))
    with pytest.raises(NestingTooDeep):
        parse_string("*".join(["2"] * 1500))
    with pytest.raises(NestingTooDeep):
        parse_string("-".join(["t"] * 40), config=ParserConfig(max_depth=4))


def test_piecewise_parse():
    root = parse_string("p2*t>0|4>2|8>6")
    assert isinstance(root, PiecewiseTerm)
    assert root.cycle is None
    assert [after for _, after in root.parts] == [0.0, 2.0, 6.0]
    assert root.parts[0][0] == BinaryOpTerm(OpType.MUL, ConstantTerm(2), ParameterTerm())


def test_looping_piecewise_parse():
    root = parse_string("p[10]18>0|23>4")
    assert root.cycle == 10.0
    assert len(root.parts) == 2


def test_piecewise_negative_threshold():
    root = parse_string("p1>-5|2>0")
    assert [after for _, after in root.parts] == [-5.0, 0.0]


@pytest.mark.parametrize("text", ["p", "p2", "p2>", "p2>0|", "p[10 2>0", "p[]2>0", "p2>t"])
def test_piecewise_errors(text):
    with pytest.raises(UnexpectedToken):
        parse_string(text)


def test_parse_does_not_need_source_text():
    root = parse(tokenize("1+2*t*t"))
    assert root.evaluate(3.0) == 19.0
