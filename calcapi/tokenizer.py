"""Lexer for infix arithmetic expressions."""
from __future__ import annotations

import string
from typing import List, Optional

from calcapi.errors import (
    AdjacentOperatorsError,
    MultipleDecimalPointsError,
    UnaryOperatorSpacingError,
    UnknownCharacterError,
)
from calcapi.tokens import OPERATORS, SIGNS, Token, TokenKind

DIGITS = frozenset(string.digits)


def _is_number_char(ch: str) -> bool:
    return ch in DIGITS or ch == "."


def _starts_operand_context(prev: Optional[Token]) -> bool:
    # A sign is unary at the start of input or right after an operator or "(".
    if prev is None:
        return True
    return prev.kind in (TokenKind.OPERATOR, TokenKind.LEFT_PAREN)


def tokenize(expression: str) -> List[Token]:
    """Split ``expression`` into tokens, classifying each sign as unary or binary.

    Raises the first ``CalculationError`` met during the scan.
    """
    tokens: List[Token] = []
    prev: Optional[Token] = None
    i = 0
    length = len(expression)

    while i < length:
        ch = expression[i]

        if ch.isspace():
            i += 1
            continue

        if ch == "(":
            prev = Token(TokenKind.LEFT_PAREN, ch)
            tokens.append(prev)
            i += 1
            continue

        if ch == ")":
            prev = Token(TokenKind.RIGHT_PAREN, ch)
            tokens.append(prev)
            i += 1
            continue

        if ch in OPERATORS:
            is_unary = ch in SIGNS and _starts_operand_context(prev)

            if is_unary and i + 1 < length and expression[i + 1] == " ":
                raise UnaryOperatorSpacingError(ch, i)

            if not is_unary and prev is not None and prev.is_operator and not prev.is_unary:
                raise AdjacentOperatorsError(prev.text, ch, i)

            prev = Token(TokenKind.OPERATOR, ch, is_unary=is_unary)
            tokens.append(prev)
            i += 1
            continue

        if _is_number_char(ch):
            start = i
            seen_dot = False
            while i < length and _is_number_char(expression[i]):
                if expression[i] == ".":
                    if seen_dot:
                        raise MultipleDecimalPointsError(i)
                    seen_dot = True
                i += 1
            prev = Token(TokenKind.NUMBER, expression[start:i])
            tokens.append(prev)
            continue

        raise UnknownCharacterError(ch, i)

    return tokens
