from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class TokenKind(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"


OPERATORS = frozenset("+-*/")
SIGNS = frozenset("+-")

PRECEDENCE: Dict[str, int] = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
}


def precedence(operator: str) -> int:
    return PRECEDENCE.get(operator, 0)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    is_unary: bool = False

    @property
    def is_operator(self) -> bool:
        return self.kind is TokenKind.OPERATOR

    @property
    def is_paren(self) -> bool:
        return self.kind in (TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN)

    def __str__(self) -> str:
        if self.is_operator and self.is_unary:
            return f"u{self.text}"
        return self.text
