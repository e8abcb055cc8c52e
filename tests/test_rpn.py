import math

import pytest

from calcapi.errors import (
    DivisionByZeroError,
    ErrorKind,
    InvalidExpressionError,
    InvalidNumberLiteralError,
    MissingOperandError,
    NumericOverflowError,
)
from calcapi.rpn import evaluate_postfix
from calcapi.tokens import Token, TokenKind


def num(text: str) -> Token:
    return Token(TokenKind.NUMBER, text)


def op(text: str, unary: bool = False) -> Token:
    return Token(TokenKind.OPERATOR, text, is_unary=unary)


def test_binary_operators():
    assert evaluate_postfix([num("2"), num("3"), op("+")]) == 5
    assert evaluate_postfix([num("2"), num("3"), op("*")]) == 6
    assert evaluate_postfix([num("7"), num("2"), op("/")]) == 3.5


def test_operand_order_for_non_commutative_operators():
    assert evaluate_postfix([num("8"), num("3"), op("-")]) == 5
    assert evaluate_postfix([num("1"), num("4"), op("/")]) == 0.25


def test_unary_operators():
    assert evaluate_postfix([num("4"), op("-", unary=True)]) == -4
    assert evaluate_postfix([num("4"), op("+", unary=True)]) == 4
    assert evaluate_postfix([num("4"), op("-", unary=True), op("-", unary=True)]) == 4


def test_result_is_float():
    result = evaluate_postfix([num("2")])
    assert isinstance(result, float)


def test_division_by_zero():
    with pytest.raises(DivisionByZeroError) as excinfo:
        evaluate_postfix([num("10"), num("0"), op("/")])
    assert excinfo.value.kind is ErrorKind.DIVISION_BY_ZERO

    with pytest.raises(DivisionByZeroError):
        evaluate_postfix([num("1"), num("0.0"), op("-", unary=True), op("/")])


def test_fractional_divisor_is_finite():
    result = evaluate_postfix([num("1"), num("0.5"), op("/")])
    assert math.isfinite(result)


def test_invalid_number_literal():
    with pytest.raises(InvalidNumberLiteralError) as excinfo:
        evaluate_postfix([num(".")])
    assert excinfo.value.literal == "."
    assert str(excinfo.value) == "invalid number '.'"


def test_missing_operand_for_unary():
    with pytest.raises(MissingOperandError) as excinfo:
        evaluate_postfix([op("-", unary=True)])
    assert excinfo.value.unary
    assert str(excinfo.value) == "missing value for unary operator '-'"


def test_missing_operand_for_binary():
    with pytest.raises(MissingOperandError) as excinfo:
        evaluate_postfix([num("2"), op("+")])
    assert not excinfo.value.unary
    assert excinfo.value.kind is ErrorKind.MISSING_OPERAND


@pytest.mark.parametrize(
    "tokens",
    [
        [],
        [num("2"), num("3")],
        [num("1"), num("2"), num("3"), op("+")],
    ],
)
def test_residual_stack_must_hold_one_value(tokens):
    with pytest.raises(InvalidExpressionError):
        evaluate_postfix(tokens)


def test_out_of_range_literal_is_invalid():
    literal = "1" + "0" * 400
    with pytest.raises(InvalidNumberLiteralError) as excinfo:
        evaluate_postfix([num(literal)])
    assert excinfo.value.kind is ErrorKind.INVALID_NUMBER_LITERAL
    assert excinfo.value.literal == literal


def test_largest_representable_literal_is_accepted():
    literal = str(int(1.7e308))
    assert evaluate_postfix([num(literal)]) == float(literal)


def test_multiplication_overflow():
    big = "1" + "0" * 300
    with pytest.raises(NumericOverflowError) as excinfo:
        evaluate_postfix([num(big), num(big), op("*")])
    assert excinfo.value.kind is ErrorKind.NUMERIC_OVERFLOW
    assert str(excinfo.value) == "result of operator '*' is out of range"


def test_division_overflow():
    with pytest.raises(NumericOverflowError):
        evaluate_postfix([num("1" + "0" * 300), num("0." + "0" * 20 + "1"), op("/")])
