from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    UNKNOWN_CHARACTER = "unknown_character"
    MULTIPLE_DECIMAL_POINTS = "multiple_decimal_points"
    UNARY_OPERATOR_SPACING = "unary_operator_spacing"
    ADJACENT_OPERATORS = "adjacent_operators"
    MISMATCHED_PARENTHESES = "mismatched_parentheses"
    INVALID_NUMBER_LITERAL = "invalid_number_literal"
    MISSING_OPERAND = "missing_operand"
    DIVISION_BY_ZERO = "division_by_zero"
    INVALID_EXPRESSION = "invalid_expression"
    NUMERIC_OVERFLOW = "numeric_overflow"


class CalculationError(ValueError):
    """Base class for every way an expression can fail to evaluate.

    Subclasses fix ``kind``; ``position`` is the zero-based character offset
    of the offending input when the failing stage knows it.
    """

    kind: ErrorKind

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "error_type": self.kind.value}
        if self.position is not None:
            payload["position"] = self.position
        return payload


class UnknownCharacterError(CalculationError):
    kind = ErrorKind.UNKNOWN_CHARACTER

    def __init__(self, char: str, position: int) -> None:
        super().__init__(f"unknown character '{char}' at position {position}", position)
        self.char = char


class MultipleDecimalPointsError(CalculationError):
    kind = ErrorKind.MULTIPLE_DECIMAL_POINTS

    def __init__(self, position: int) -> None:
        super().__init__(f"invalid number format with multiple dots at position {position}", position)


class UnaryOperatorSpacingError(CalculationError):
    kind = ErrorKind.UNARY_OPERATOR_SPACING

    def __init__(self, operator: str, position: int) -> None:
        super().__init__(
            f"unary operator '{operator}' must be directly before the number or '(', without spaces",
            position,
        )
        self.operator = operator


class AdjacentOperatorsError(CalculationError):
    kind = ErrorKind.ADJACENT_OPERATORS

    def __init__(self, previous: str, current: str, position: int) -> None:
        super().__init__(
            f"two operators '{previous}' and '{current}' cannot be next to each other at position {position}",
            position,
        )
        self.previous = previous
        self.current = current


class MismatchedParenthesesError(CalculationError):
    kind = ErrorKind.MISMATCHED_PARENTHESES

    def __init__(self) -> None:
        super().__init__("mismatched parentheses")


class InvalidNumberLiteralError(CalculationError):
    kind = ErrorKind.INVALID_NUMBER_LITERAL

    def __init__(self, literal: str) -> None:
        super().__init__(f"invalid number '{literal}'")
        self.literal = literal


class MissingOperandError(CalculationError):
    kind = ErrorKind.MISSING_OPERAND

    def __init__(self, operator: str, unary: bool) -> None:
        if unary:
            message = f"missing value for unary operator '{operator}'"
        else:
            message = f"missing values for operator '{operator}'"
        super().__init__(message)
        self.operator = operator
        self.unary = unary


class DivisionByZeroError(CalculationError):
    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self) -> None:
        super().__init__("division by zero")


class InvalidExpressionError(CalculationError):
    kind = ErrorKind.INVALID_EXPRESSION

    def __init__(self) -> None:
        super().__init__("invalid expression")


class NumericOverflowError(CalculationError):
    kind = ErrorKind.NUMERIC_OVERFLOW

    def __init__(self, operator: str) -> None:
        super().__init__(f"result of operator '{operator}' is out of range")
        self.operator = operator
