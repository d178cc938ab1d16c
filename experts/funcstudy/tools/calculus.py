"""Calculus tool — function study: resolve, domain, limit, evaluate."""

import logging

from .errors import StudyError
from .evaluator import compile_expression
from .readable import to_readable
from .study import FuncStudy

logger = logging.getLogger(__name__)

OPERATIONS = {"resolve", "domain", "limit", "evaluate"}


def calculus_tool(expression: str, operation: str = "resolve",
                  point: str = None) -> dict:
    """All-in-one function study tool.

    Use to study a real function of x. Operations: resolve (domain + limits),
    domain, limit, evaluate (value at `point`). Syntax: + - * / ^, parentheses,
    sqrt(...) or √(...), ln(...), log(...) (base 10), implicit multiplication (2x).
    """
    try:
        study = FuncStudy(expression)

        if operation == "resolve":
            return study.resolve().to_dict()

        elif operation == "domain":
            return study.domain().to_dict()

        elif operation == "limit":
            return study.limit().to_dict()

        elif operation == "evaluate":
            if point is None:
                return {"error": "evaluate requires a point", "status": 400}
            x = float(point)
            value = compile_expression(expression)(x)
            return {"input": expression, "point": to_readable(x),
                    "result": to_readable(value), "numeric": value}

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


def error_result(e: StudyError, expression, operation) -> dict:
    return {"error": e.message, "kind": type(e).__name__, "code": e.code,
            "status": e.status, "expression": expression, "operation": operation}
