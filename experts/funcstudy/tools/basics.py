"""Two-operand arithmetic: add, sub, mul, power, div.

Operands may be numbers or numeric strings; results are always finite reals.
"""

import math

from .errors import DivisionByZero, EvaluationFailure, InvalidNumber


def to_finite_number(value):
    """Return value as a finite float, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _operand(value):
    number = to_finite_number(value)
    if number is None:
        raise InvalidNumber(f"Operands must be finite numbers, got {value!r}")
    return number


def _real(result, label):
    if isinstance(result, complex) or not math.isfinite(result):
        raise EvaluationFailure(f"{label} is not a finite real number")
    return result


def add(a, b) -> float:
    x, y = _operand(a), _operand(b)
    return _real(x + y, f"{x!r} + {y!r}")


def sub(a, b) -> float:
    x, y = _operand(a), _operand(b)
    return _real(x - y, f"{x!r} - {y!r}")


def mul(a, b) -> float:
    x, y = _operand(a), _operand(b)
    return _real(x * y, f"{x!r} * {y!r}")


def power(base, exponent) -> float:
    x, y = _operand(base), _operand(exponent)
    try:
        result = x ** y
    except (ZeroDivisionError, OverflowError) as e:
        raise EvaluationFailure(f"{x!r} ^ {y!r}: {e}") from e
    return _real(result, f"{x!r} ^ {y!r}")


def div(a, b) -> float:
    x, y = _operand(a), _operand(b)
    if y == 0:
        raise DivisionByZero("The divisor cannot be 0")
    return _real(x / y, f"{x!r} / {y!r}")
