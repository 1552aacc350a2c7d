import math
import warnings
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from parametrizer import (
    EmptyExpression, InvalidToken, NestingTooDeep, Parametrizer, ParametrizerFunction, ParserConfig,
    UnexpectedToken, UnknownFunction, UnmatchedParenthesis
)
from parametrizer.term import BinaryOpTerm, ConstantTerm, OpType, ParameterTerm


@pytest.mark.parametrize("c", ["0", "1", "1.35", "42.5", "1000000"])
def test_constants_ignore_parameter(c):
    parametrizer = Parametrizer(c)
    for t in (-5.0, 0.0, 2.0, 3.4, 1e12):
        assert parametrizer.evaluate(t) == float(c)


def test_parameter_is_identity():
    variable = Parametrizer("t")
    for t in (3.0, -1.25, 0.0, 1e-300, 1e300):
        assert variable.evaluate(t) == t
    assert variable.evaluate(1.25) != 4.2


@pytest.mark.parametrize("text, t, expected", [
    ("2+3*4", 0, 14.0),
    ("2^3^2", 0, 512.0),
    ("(2+3)*4", 0, 20.0),
    ("1+2*t*t", 3, 19.0),
    ("15-3*t", 3, 6.0),
    ("1+t", 8, 9.0),
    ("13+((2*t)+5)", 1, 20.0),
    ("13+((2*t)+5)", 6, 30.0),
    ("6/t", 3, 2.0),
    ("6/t", 2, 3.0),
    ("13-t", 3, 10.0),
    ("-t", 9, -9.0),
])
def test_evaluate(text, t, expected):
    assert Parametrizer(text).evaluate(t) == expected


def test_normalization():
    assert Parametrizer("4\\2").evaluate(8) == 2.0
    assert Parametrizer("6 + T").evaluate(2) == 8.0
    assert Parametrizer("SIN(t*t + t - 1)").evaluate(3.0) == pytest.approx(math.sin(11.0))
    assert Parametrizer.new("1+t").evaluate(0.16) == pytest.approx(1.16)


def test_division_by_zero_is_infinite():
    assert Parametrizer("1/0").evaluate(0.0) == math.inf
    assert Parametrizer("t/0").evaluate(-1.0) == -math.inf
    assert math.isnan(Parametrizer("0/0").evaluate(1.0))


def test_negative_sqrt_is_nan():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert math.isnan(Parametrizer("sqrt(-1)").evaluate(0.0))
        assert math.isnan(Parametrizer("sqrt(t)").evaluate(-4.0))
        assert Parametrizer("ln(t)").evaluate(0.0) == -math.inf


@pytest.mark.parametrize("text, error", [
    ("", EmptyExpression),
    ("   ", EmptyExpression),
    ("(1+2", UnmatchedParenthesis),
    ("1+", UnexpectedToken),
    ("1 2", UnexpectedToken),
    ("1+2)", UnexpectedToken),
    ("foo(1)", UnknownFunction),
    ("1 # 2", InvalidToken),
    ("1.2.3", InvalidToken),
])
def test_malformed_input(text, error):
    with pytest.raises(error) as info:
        Parametrizer(text)
    assert info.value.expression == text


def test_evaluation_is_idempotent():
    parametrizer = Parametrizer("sin(t)^2 + exp(-t) / sqrt(t)")
    for t in (0.1, 2.5, -3.0, 0.0):
        first = parametrizer.evaluate(t)
        for _ in range(5):
            again = parametrizer.evaluate(t)
            assert np.float64(first).tobytes() == np.float64(again).tobytes()


def test_concurrent_evaluation():
    parametrizer = Parametrizer("1+5*t+25*t*t")
    ts = [i * 0.37 for i in range(200)]
    expected = [parametrizer.evaluate(t) for t in ts]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(parametrizer.evaluate, ts))
    assert results == expected


def test_from_term():
    term = BinaryOpTerm(OpType.ADD, ConstantTerm(1), ParameterTerm())
    parametrizer = Parametrizer.from_term(term)
    assert parametrizer.term is term
    assert parametrizer.evaluate(8.0) == 9.0
    assert parametrizer.expression == "(1 + t)"
    with pytest.raises(TypeError):
        Parametrizer.from_term("1+t")


def test_constructor_rejects_other_types():
    with pytest.raises(TypeError):
        Parametrizer(42)


def test_new_functions():
    def square(t):
        return t * t

    parametrizer = Parametrizer.new_functions("Log( square(t) + 3 )", [
        ParametrizerFunction("LOG", math.log),
        ParametrizerFunction("square", square),
    ])
    assert parametrizer.evaluate(2.0) == pytest.approx(math.log(7.0))
    assert parametrizer.evaluate(5.0) == pytest.approx(math.log(28.0))
    # Builtins are still available next to user functions
    assert Parametrizer.new_functions("square(cos(0))", [ParametrizerFunction("square", square)]).evaluate(0) == 1.0


def test_quick_new():
    sin = ParametrizerFunction("sin", math.sin)
    assert Parametrizer.quick_new("4/2").evaluate(8) == 2.0
    assert Parametrizer.quick_new("15+(-3*t)").evaluate(3) == 6.0
    assert Parametrizer.quick_new("6+t").evaluate(2) == 8.0
    assert Parametrizer.quick_new("sin(t*t+t+-1)", [sin]).evaluate(3.0) == math.sin(11.0)
    assert Parametrizer.quick_new("log(t+3)", [ParametrizerFunction("log", math.log)]).evaluate(5.0) == math.log(8.0)


def test_quick_new_is_strict():
    with pytest.raises(InvalidToken):
        Parametrizer.quick_new("6+T")
    with pytest.raises(InvalidToken):
        Parametrizer.quick_new("4\\2")
    with pytest.raises(UnknownFunction):
        Parametrizer.quick_new("sin(t)")


def test_piecewise():
    p1 = Parametrizer("p2>0|4>2|8>6")
    p2 = Parametrizer("p2*t>0|4>2")
    p3 = Parametrizer("p[10]18>0|23>4")

    assert p1.evaluate(1) == 2.0
    assert p1.evaluate(5) == 4.0
    assert p1.evaluate(7) == 8.0
    assert p2.evaluate(1) == 2.0
    assert p2.evaluate(9) == 4.0
    assert p3.evaluate(23) == 18.0
    assert p3.evaluate(106) == 23.0


def test_custom_parameter():
    config = ParserConfig(parameter="x")
    assert Parametrizer("x*X + 1", config=config).evaluate(3.0) == 10.0
    with pytest.raises(InvalidToken):
        Parametrizer("t", config=config)


def test_evaluate_many():
    parametrizer = Parametrizer("t*t - 1/t")
    values = parametrizer.evaluate_many([1.0, 2.0, 0.0])
    assert isinstance(values, np.ndarray)
    np.testing.assert_array_equal(values, [0.0, 3.5, -np.inf])
    assert parametrizer.evaluate_many(2.0).shape == (1,)

    grid = np.linspace(-2.0, 2.0, 5).reshape(5, 1)
    assert parametrizer.evaluate_many(grid).shape == (5, 1)


def test_call_and_str():
    parametrizer = Parametrizer("1 + t")
    assert parametrizer(2.0) == 3.0
    assert str(parametrizer) == "1 + t"
    assert repr(parametrizer) == "Parametrizer('1 + t')"


def test_long_sum_is_rejected_not_overflowed():
    text = "+".join(["t"] * 600)
    with pytest.raises(NestingTooDeep) as info:
        Parametrizer(text)
    assert info.value.expression == text
    assert Parametrizer("+".join(["t"] * 300)).evaluate(2.0) == 600.0
