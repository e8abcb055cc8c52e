from __future__ import annotations

from typing import List, Sequence

from calcapi.errors import MismatchedParenthesesError
from calcapi.tokens import Token, TokenKind, precedence


def to_postfix(tokens: Sequence[Token]) -> List[Token]:
    """Reorder infix tokens into postfix (RPN) order.

    Unary signs go straight onto the operator stack so they apply to the next
    operand before any binary operator that follows it.
    """
    output: List[Token] = []
    stack: List[Token] = []

    for token in tokens:
        if token.kind is TokenKind.NUMBER:
            output.append(token)
        elif token.kind is TokenKind.OPERATOR:
            if token.is_unary:
                stack.append(token)
                continue
            # >= keeps equal-precedence operators left-associative.
            while stack and stack[-1].is_operator and precedence(stack[-1].text) >= precedence(token.text):
                output.append(stack.pop())
            stack.append(token)
        elif token.kind is TokenKind.LEFT_PAREN:
            stack.append(token)
        elif token.kind is TokenKind.RIGHT_PAREN:
            found_left_paren = False
            while stack:
                top = stack.pop()
                if top.kind is TokenKind.LEFT_PAREN:
                    found_left_paren = True
                    break
                output.append(top)
            if not found_left_paren:
                raise MismatchedParenthesesError()

    while stack:
        top = stack.pop()
        if top.is_paren:
            raise MismatchedParenthesesError()
        output.append(top)

    return output
