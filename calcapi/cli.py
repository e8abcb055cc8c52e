#!/usr/bin/env python3
"""Command-line calculator.

Usage:
  calcapi "2 + 2 * (3 - 1)"
  echo "10/4" | calcapi --postfix

Outputs JSON:
  {"status":"ok","result":6.0}
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from calcapi.calculator import calculate

logger = logging.getLogger("calcapi.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="calcapi", description="Evaluate an arithmetic expression.")
    parser.add_argument("expression", nargs="*", help="expression to evaluate; read from stdin when omitted")
    parser.add_argument("--postfix", action="store_true", help="include the RPN form in the output")
    return parser


def _read_expression(parts: List[str]) -> str:
    if parts:
        return " ".join(parts)
    return sys.stdin.read().rstrip("\r\n")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    expression = _read_expression(args.expression)
    result = calculate(expression, include_postfix=args.postfix)
    print(json.dumps(result, separators=(",", ":")))
    if result["status"] != "ok":
        logger.debug("calculation failed", extra={"extra": {"error_type": result["error_type"]}})
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
