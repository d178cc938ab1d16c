"""Readable numbers: integer, reduced fraction, or bounded decimal.

Fractions are found with a continued-fraction expansion and rendered through
sympy.Rational, which keeps them reduced with the sign on the numerator.
"""

import math
from typing import Final

import sympy

from .errors import DivisionByZero

NAN: Final[str] = "NaN"
ZERO_EPS: Final[float] = 1e-12
FRACTION_TOLERANCE: Final[float] = 1e-10
MAX_DENOMINATOR: Final[int] = 1_000_000
DECIMAL_DIGITS: Final[int] = 10
RATIO_SCALE: Final[float] = 1e10


def to_readable(value: float) -> str:
    """Canonical display string for a real value."""
    if not math.isfinite(value):
        return NAN
    if abs(value) < ZERO_EPS:
        return "0"
    if float(value).is_integer():
        return str(int(value))

    frac = to_fraction(value, FRACTION_TOLERANCE, MAX_DENOMINATOR)
    if frac is not None:
        return _render(*frac)

    text = repr(round(value, DECIMAL_DIGITS))
    return text[:-2] if text.endswith(".0") else text


def to_fraction(value: float, tolerance: float = FRACTION_TOLERANCE,
                max_denominator: int = MAX_DENOMINATOR):
    """Continued-fraction approximation of value as (numerator, denominator).

    Returns None when the convergent denominators exceed max_denominator
    before the approximation is within tolerance.
    """
    x = value
    a = math.floor(x)
    h_prev, k_prev = 1, 0
    h, k = a, 1

    while abs(value - h / k) > tolerance:
        remainder = x - a
        if remainder == 0:
            break
        x = 1 / remainder
        if not math.isfinite(x):
            break
        a = math.floor(x)

        h, h_prev = a * h + h_prev, h
        k, k_prev = a * k + k_prev, k

        if k > max_denominator:
            return None

    g = math.gcd(h, k) or 1
    return h // g, k // g


def to_fraction_from_ratio(numerator: float, denominator: float) -> str:
    """Render numerator/denominator as a reduced fraction ("0", "n" or "n/d")."""
    if denominator == 0:
        raise DivisionByZero("Denominator is zero")

    n = round(numerator * RATIO_SCALE)
    d = round(denominator * RATIO_SCALE)
    if d == 0:
        raise DivisionByZero(f"Denominator {denominator!r} rounds to zero")
    return _render(n, d)


def parse_readable(text: str):
    """Inverse of to_readable for finite values; None for markers."""
    try:
        if "/" in text:
            n, d = text.split("/", 1)
            nn, dd = float(n), float(d)
            if dd == 0 or not (math.isfinite(nn) and math.isfinite(dd)):
                return None
            return nn / dd
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _render(n, d):
    return str(sympy.Rational(n, d))
