import io
import math
import sys
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from loxexpr.lox_ast import Binary, Expression, Grouping, Literal, Unary
from loxexpr.lox_constants import RECURSION_LIMIT, TokenType
from loxexpr.lox_errors import ErrorReporter, RuntimeTypeError
from loxexpr.lox_interpreter import Interpreter, evaluate
from loxexpr.lox_parser import parse
from loxexpr.lox_scanner import Token, scan


def run(source: str) -> Any:
    reporter = ErrorReporter(io.StringIO())
    return evaluate(parse(scan(source, reporter), reporter))


def op(type_: TokenType, lexeme: str, line: int = 1) -> Token:
    return Token(type_, lexeme, None, line)


PLUS = op(TokenType.PLUS, "+")
MINUS = op(TokenType.MINUS, "-")


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 + 2 * 3", 7.0),
        ("1 - 2 - 3", -4.0),
        ("(1 + 2) * 3", 9.0),
        ("8 / 4 / 2", 1.0),
        ("7 / 2", 3.5),
        ("-3", -3.0),
        ("--3", 3.0),
        ("-(2 + 3)", -5.0),
        ("1.5 + 1.5", 3.0),
        ('"foo" + "bar"', "foobar"),
        ('"" + ""', ""),
        ("1 < 2", True),
        ("2 <= 2", True),
        ("1 > 2", False),
        ("2 >= 3", False),
        ("1 + 2 < 3 * 4", True),
    ],
)  # type: ignore[misc]
def test_arithmetic_and_comparison(source: str, expected: Any) -> None:
    result = run(source)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("!nil", True),
        ("!false", True),
        ("!true", False),
        ("!0", False),
        ('!""', False),
        ('!"x"', False),
        ("!!nil", False),
        ("!!0", True),
    ],
)  # type: ignore[misc]
def test_truthiness_table(source: str, expected: bool) -> None:
    assert run(source) is expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ('1 == "1"', False),
        ("nil == nil", True),
        ("nil == false", False),
        ("false == nil", False),
        ("true == 1", False),
        ("0 == false", False),
        ("1 == 1", True),
        ("1 == 2", False),
        ('"a" == "a"', True),
        ('"a" == "b"', False),
        ("true == true", True),
        ("true != false", True),
        ("nil != nil", False),
        ('1 != "1"', True),
    ],
)  # type: ignore[misc]
def test_equality_never_coerces(source: str, expected: bool) -> None:
    assert run(source) is expected


def test_division_by_zero_follows_ieee() -> None:
    assert run("1 / 0") == math.inf
    assert run("-1 / 0") == -math.inf
    assert math.isnan(run("0 / 0"))


def test_division_by_negative_zero() -> None:
    assert run("1 / -0") == -math.inf


def test_overflow_is_infinity() -> None:
    assert run("1" + "0" * 308 + " * 10") == math.inf


def test_nan_comparisons_are_false() -> None:
    assert run("0/0 < 1") is False
    assert run("0/0 == 0/0") is False


@pytest.mark.parametrize(
    "source,message",
    [
        ('"a" + 1', "Operands must be two numbers or two strings."),
        ('1 + "a"', "Operands must be two numbers or two strings."),
        ("nil + nil", "Operands must be two numbers or two strings."),
        ("true + 1", "Operands must be two numbers or two strings."),
        ('"a" - "b"', "Operands must be numbers."),
        ('"a" * 2', "Operands must be numbers."),
        ("1 / nil", "Operands must be numbers."),
        ('"a" < "b"', "Operands must be numbers."),
        ("true >= false", "Operands must be numbers."),
        ('-"a"', "Operand must be a number."),
        ("-nil", "Operand must be a number."),
        ("-true", "Operand must be a number."),
    ],
)  # type: ignore[misc]
def test_type_errors(source: str, message: str) -> None:
    with pytest.raises(RuntimeTypeError) as info:
        run(source)
    assert info.value.message == message


def test_string_plus_number_never_divides() -> None:
    expr = Binary(Literal("a"), PLUS, Literal(1.0))
    with pytest.raises(RuntimeTypeError) as info:
        evaluate(expr)
    assert info.value.token is PLUS


def test_runtime_error_carries_operator_line() -> None:
    with pytest.raises(RuntimeTypeError) as info:
        run('1 +\n\n"a"')
    assert info.value.line == 1


def test_operands_evaluated_before_type_check() -> None:
    # The left operand's own error wins: evaluation is strictly post-order.
    with pytest.raises(RuntimeTypeError) as info:
        run('(-"x") + "y"')
    assert info.value.message == "Operand must be a number."


def test_interpret_reports_then_reraises(reporter: ErrorReporter) -> None:
    expr = Unary(MINUS, Literal("x"))
    with pytest.raises(RuntimeTypeError):
        Interpreter(reporter).interpret(expr)
    assert reporter.had_runtime_error
    assert not reporter.had_error
    assert reporter.stream.getvalue() == "Operand must be a number.\n[line 1]\n"  # type: ignore[attr-defined]


def test_interpret_success_reports_nothing(reporter: ErrorReporter) -> None:
    assert Interpreter(reporter).interpret(Grouping(Literal(2.0))) == 2.0
    assert reporter.errors == []


def test_literal_and_grouping_are_identity() -> None:
    assert evaluate(Literal(None)) is None
    assert evaluate(Grouping(Grouping(Literal("s")))) == "s"


def test_unknown_operator_is_a_runtime_error() -> None:
    expr = Binary(Literal(1.0), op(TokenType.EQUAL, "="), Literal(2.0))
    with pytest.raises(RuntimeTypeError):
        evaluate(expr)


def test_integer_literals_are_numbers() -> None:
    assert evaluate(Binary(Literal(2), PLUS, Literal(3.5))) == 5.5  # type: ignore[arg-type]


def test_long_sum_evaluates() -> None:
    assert run(" + ".join(["1"] * 1000)) == 1000.0


def test_deep_parentheses_evaluate() -> None:
    assert run("(" * 200 + "-1" + ")" * 200) == -1.0


def test_tree_too_deep_to_walk_is_reported(reporter: ErrorReporter) -> None:
    expr: Expression = Literal(1.0)
    for line in range(RECURSION_LIMIT, 0, -1):
        expr = Unary(op(TokenType.MINUS, "-", line), expr)
    limit = sys.getrecursionlimit()
    with pytest.raises(RuntimeTypeError) as info:
        Interpreter(reporter).interpret(expr)
    assert info.value.message == "Expression too deeply nested."
    assert info.value.line == 1
    assert reporter.had_runtime_error
    assert sys.getrecursionlimit() == limit


def test_tree_evaluates_repeatedly() -> None:
    expr = parse(scan("(1 + 2) * 3"))
    interpreter = Interpreter()
    assert interpreter.evaluate(expr) == interpreter.evaluate(expr) == 9.0


@given(
    a=st.floats(allow_nan=False, allow_infinity=False, width=32),
    b=st.floats(allow_nan=False, allow_infinity=False, width=32),
    c=st.floats(allow_nan=False, allow_infinity=False, width=32),
)  # type: ignore[misc]
def test_subtraction_is_left_associative(a: float, b: float, c: float) -> None:
    expr = Binary(Binary(Literal(a), MINUS, Literal(b)), MINUS, Literal(c))
    assert evaluate(expr) == (a - b) - c


@given(st.one_of(st.none(), st.booleans(), st.floats(allow_nan=False), st.text()))  # type: ignore[misc]
def test_double_bang_matches_truthiness(value: Any) -> None:
    bang = op(TokenType.BANG, "!")
    result = evaluate(Unary(bang, Unary(bang, Literal(value))))
    assert result is (value is not None and value is not False)


@given(st.one_of(st.none(), st.booleans(), st.floats(allow_nan=False), st.text()))  # type: ignore[misc]
def test_equality_is_reflexive(value: Any) -> None:
    eq = op(TokenType.EQUAL_EQUAL, "==")
    assert evaluate(Binary(Literal(value), eq, Literal(value))) is True
