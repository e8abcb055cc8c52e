"""Expression evaluation pipeline: tokenize, convert to RPN, evaluate."""
from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from calcapi.errors import CalculationError
from calcapi.rpn import evaluate_postfix
from calcapi.shunting_yard import to_postfix
from calcapi.tokenizer import tokenize
from calcapi.tokens import Token


def _run(expression: str) -> Tuple[List[Token], float]:
    postfix = to_postfix(tokenize(expression))
    return postfix, evaluate_postfix(postfix)


def evaluate(expression: str) -> float:
    """Evaluate an infix arithmetic expression.

    Raises ``CalculationError`` (a ``ValueError``) for any invalid input.
    """
    _, result = _run(expression)
    return result


def format_postfix(tokens: Sequence[Token]) -> str:
    return " ".join(str(token) for token in tokens)


def calculate(expression: str, include_postfix: bool = False) -> Dict[str, Any]:
    try:
        postfix, result = _run(expression)
    except CalculationError as exc:
        return {"status": "error", **exc.to_dict()}

    response: Dict[str, Any] = {"status": "ok", "result": result}
    if include_postfix:
        response["postfix"] = format_postfix(postfix)
    return response
