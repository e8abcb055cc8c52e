from __future__ import annotations

import math
import operator
from typing import Callable, Dict, List, Sequence

from calcapi.errors import (
    DivisionByZeroError,
    InvalidExpressionError,
    InvalidNumberLiteralError,
    MissingOperandError,
    NumericOverflowError,
)
from calcapi.tokens import Token, TokenKind

BINARY_OPS: Dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}

UNARY_OPS: Dict[str, Callable[[float], float]] = {
    "+": operator.pos,
    "-": operator.neg,
}


def _parse_number(literal: str) -> float:
    try:
        value = float(literal)
    except ValueError as exc:
        raise InvalidNumberLiteralError(literal) from exc
    # float() saturates to inf instead of failing on out-of-range literals.
    if math.isinf(value):
        raise InvalidNumberLiteralError(literal)
    return value


def evaluate_postfix(tokens: Sequence[Token]) -> float:
    """Evaluate an RPN token sequence with a single value stack.

    Every value on the stack is finite: literals out of float range are
    rejected on parse and an operator whose result overflows raises
    ``NumericOverflowError``.
    """
    stack: List[float] = []

    for token in tokens:
        if token.kind is TokenKind.NUMBER:
            stack.append(_parse_number(token.text))
            continue

        if token.kind is not TokenKind.OPERATOR:
            continue

        if token.is_unary:
            if not stack:
                raise MissingOperandError(token.text, unary=True)
            stack.append(UNARY_OPS[token.text](stack.pop()))
            continue

        if len(stack) < 2:
            raise MissingOperandError(token.text, unary=False)
        right = stack.pop()
        left = stack.pop()
        if token.text == "/" and right == 0:
            raise DivisionByZeroError()
        result = BINARY_OPS[token.text](left, right)
        if not math.isfinite(result):
            raise NumericOverflowError(token.text)
        stack.append(result)

    if len(stack) != 1:
        raise InvalidExpressionError()

    return stack[0]
