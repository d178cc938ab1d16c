"""Arithmetic tool — compute, add, sub, mul, pow, div.

Binary operations take two comma-separated operands ("12, 18").
"""

import logging

from . import basics
from .calculus import error_result
from .errors import StudyError
from .evaluator import evaluate
from .readable import to_readable

logger = logging.getLogger(__name__)

OPERATIONS = {"compute", "add", "sub", "mul", "pow", "div"}

_BINARY = {
    "add": (basics.add, "+"),
    "sub": (basics.sub, "-"),
    "mul": (basics.mul, "*"),
    "pow": (basics.power, "^"),
    "div": (basics.div, "/"),
}


def evaluate_readable(expression: str, variables: dict = None) -> str:
    """Evaluate an expression and format the value as a readable number."""
    return to_readable(evaluate(expression, variables))


def math_tool(expression: str, operation: str = "compute", point: str = None) -> dict:
    """All-in-one arithmetic tool.

    Use for exact-looking arithmetic. Operations: compute (evaluate an expression,
    optionally at x = point), add, sub, mul, pow, div (two comma-separated numbers).
    Results are integers, reduced fractions or decimals.
    """
    try:
        if operation == "compute":
            variables = {"x": float(point)} if point is not None else None
            value = evaluate(expression, variables)
            return {"input": expression, "result": to_readable(value), "numeric": value}

        elif operation in _BINARY:
            parts = [p.strip() for p in expression.split(",")]
            if len(parts) != 2:
                return {"error": f"{operation} requires exactly 2 comma-separated values",
                        "status": 400}
            fn, symbol = _BINARY[operation]
            value = fn(parts[0], parts[1])
            return {"operation": f"{parts[0]} {symbol} {parts[1]}", "result": value,
                    "readable": to_readable(value)}

        else:
            return {"error": f"Unknown operation '{operation}'. Use: {', '.join(sorted(OPERATIONS))}",
                    "status": 400}

    except StudyError as e:
        logger.info("%s(%r) rejected: %s", operation, expression, e.message)
        return error_result(e, expression, operation)
    except ValueError as e:
        return {"error": f"Invalid point: {e}", "status": 400,
                "expression": expression, "operation": operation}
    except Exception:
        logger.exception("%s(%r) failed", operation, expression)
        return {"error": "Internal error", "status": 500,
                "expression": expression, "operation": operation}
