"""Domain analysis: restrictions on x and their solutions.

Restrictions come from the surface syntax only: denominators (!= 0),
radicands (>= 0) and logarithm arguments (> 0). Each is solved by sampling
the restricted expression and recovering affine or quadratic coefficients.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Final

from .errors import EvaluationFailure, UnsolvableCondition
from .evaluator import compile_expression
from .readable import to_fraction_from_ratio, to_readable

logger = logging.getLogger(__name__)

OPERATORS = ("<", "<=", ">", ">=", "==", "!=")
UNIVERSAL: Final[str] = "R"
EMPTY: Final[str] = "∅"

LINEAR_CHECK_EPS: Final[float] = 1e-8
QUADRATIC_CHECK_EPS: Final[float] = 1e-7
COEFFICIENT_EPS: Final[float] = 1e-10

RADICAL_NAMES = ("sqrt", "√")
LOGARITHM_NAMES = ("log", "ln")

_TERM_CHAR_RE = re.compile(r"[a-zA-Z0-9_.^]")

_COMPARE = {
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
}

# Dividing by a negative coefficient reverses the inequality.
_FLIPPED = {"<": ">", "<=": ">=", ">": "<", ">=": "<=", "==": "==", "!=": "!="}


@dataclass(frozen=True)
class DomainCondition:
    left: str
    operator: str
    right: str

    @property
    def expression(self) -> str:
        return f"({self.left})-({self.right})"

    def __str__(self):
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class Domain:
    has_denominator: bool
    has_radical: bool
    has_logarithm: bool
    conditions: tuple

    def to_dict(self) -> dict:
        return {
            "has_denominator": self.has_denominator,
            "has_radical": self.has_radical,
            "has_logarithm": self.has_logarithm,
            "conditions": list(self.conditions),
        }


@dataclass(frozen=True)
class Linear:
    """a*x + b"""
    a: float
    b: float


@dataclass(frozen=True)
class Quadratic:
    """a*x^2 + b*x + c"""
    a: float
    b: float
    c: float


# ── Structural extraction ──────────────────────────────

def _balanced_group(exp, start):
    """Return the index just past the ')' matching the '(' at start, or None."""
    depth = 0
    for i in range(start, len(exp)):
        if exp[i] == "(":
            depth += 1
        elif exp[i] == ")":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def _read_right_term(exp, start):
    if start >= len(exp):
        return None

    if exp[start] == "(":
        end = _balanced_group(exp, start)
        return exp[start:end] if end is not None else None

    if exp.startswith("√(", start):
        end = _balanced_group(exp, start + 1)
        return exp[start:end] if end is not None else None

    i = start
    while i < len(exp) and _TERM_CHAR_RE.match(exp[i]):
        i += 1
    term = exp[start:i]
    # A function name takes its call along: 1/sqrt(x) restricts sqrt(x).
    if term in RADICAL_NAMES + LOGARITHM_NAMES and exp.startswith("(", i):
        end = _balanced_group(exp, i)
        if end is not None:
            term = exp[start:end]
    return term or None


def extract_denominators(exp: str) -> list[str]:
    """Right-hand terms of every '/' in left-to-right order."""
    out = []
    for i, ch in enumerate(exp):
        if ch == "/":
            term = _read_right_term(exp, i + 1)
            if term:
                out.append(term)
    return out


def extract_function_args(exp: str, names) -> list[str]:
    """Arguments of every call to one of names, in left-to-right order."""
    args = []
    pattern = re.compile(r"(?<![a-zA-Z])(?:" + "|".join(map(re.escape, names)) + r")\(")
    for m in pattern.finditer(exp):
        open_at = m.end() - 1
        end = _balanced_group(exp, open_at)
        if end is not None and end - open_at > 2:
            args.append(exp[open_at + 1:end - 1])
    return args


def build_conditions(expression: str) -> list[DomainCondition]:
    """Raw domain conditions: denominators, then radicands, then log arguments."""
    exp = re.sub(r"\s+", "", expression)
    conditions = [DomainCondition(d, "!=", "0") for d in extract_denominators(exp)]
    conditions += [DomainCondition(r, ">=", "0") for r in extract_function_args(exp, RADICAL_NAMES)]
    conditions += [DomainCondition(a, ">", "0") for a in extract_function_args(exp, LOGARITHM_NAMES)]
    return conditions


# ── Coefficient recovery ───────────────────────────────

def _samples(fn, xs):
    try:
        return [fn(x) for x in xs]
    except EvaluationFailure as e:
        logger.debug("sampling %r failed: %s", fn, e.message)
        return None


def linear_coefficients(fn):
    """Recover a*x + b from samples at 0, 1, 2; None if fn is not affine."""
    ys = _samples(fn, (0, 1, 2))
    if ys is None:
        return None
    y0, y1, y2 = ys
    a = y1 - y0
    b = y0
    if abs(y2 - (2 * a + b)) > LINEAR_CHECK_EPS:
        return None
    return Linear(a, b)


def quadratic_coefficients(fn):
    """Recover a*x^2 + b*x + c from samples at 0, 1, 2, checked at 3."""
    ys = _samples(fn, (0, 1, 2, 3))
    if ys is None:
        return None
    y0, y1, y2, y3 = ys
    a = (y2 - 2 * y1 + y0) / 2
    c = y0
    b = y1 - a - c
    if abs(y3 - (9 * a + 3 * b + c)) > QUADRATIC_CHECK_EPS:
        return None
    return Quadratic(a, b, c)


def real_roots(q: Quadratic, eps: float = COEFFICIENT_EPS) -> list[float]:
    """Real zeros of a quadratic, degrading to the linear case when a ~ 0."""
    if abs(q.a) < eps:
        if abs(q.b) < eps:
            return []
        return [-q.c / q.b]
    delta = q.b * q.b - 4 * q.a * q.c
    if delta < -eps:
        return []
    if abs(delta) <= eps:
        return [-q.b / (2 * q.a)]
    s = math.sqrt(delta)
    return [(-q.b - s) / (2 * q.a), (-q.b + s) / (2 * q.a)]


# ── Solving ────────────────────────────────────────────

def solve_condition(condition: DomainCondition) -> str:
    """Solve one condition into a readable restriction on x."""
    op = condition.operator
    fn = compile_expression(condition.expression)

    lin = linear_coefficients(fn)
    if lin is not None:
        return _solve_linear(lin, op)

    if op in ("!=", "=="):
        quad = quadratic_coefficients(fn)
        if quad is not None:
            return _solve_quadratic(quad, op)

    degree = "linear or quadratic" if op in ("!=", "==") else "linear"
    raise UnsolvableCondition(
        f"Condition cannot be solved automatically: {condition} (not {degree} in x)"
    )


def _solve_linear(lin, op):
    if abs(lin.a) < COEFFICIENT_EPS:
        return UNIVERSAL if _COMPARE[op](lin.b, 0) else EMPTY
    x0 = to_fraction_from_ratio(-lin.b, lin.a)
    if lin.a < 0:
        op = _FLIPPED[op]
    return f"x {op} {x0}"


def _solve_quadratic(q, op):
    if abs(q.a) < COEFFICIENT_EPS:
        if abs(q.b) < COEFFICIENT_EPS:
            always_zero = abs(q.c) < COEFFICIENT_EPS
            if op == "==":
                return UNIVERSAL if always_zero else EMPTY
            return EMPTY if always_zero else UNIVERSAL
        return f"x {op} {to_fraction_from_ratio(-q.c, q.b)}"

    delta = q.b * q.b - 4 * q.a * q.c
    if delta < -COEFFICIENT_EPS:
        return EMPTY if op == "==" else UNIVERSAL
    if abs(delta) <= COEFFICIENT_EPS:
        return f"x {op} {to_fraction_from_ratio(-q.b, 2 * q.a)}"

    x1, x2 = (to_readable(r) for r in real_roots(q))
    joiner = "or" if op == "==" else "and"
    return f"x {op} {x1} {joiner} x {op} {x2}"


def domain(expression: str) -> Domain:
    """Domain restrictions of expression; fails if any condition is unsolvable."""
    raw = build_conditions(expression)
    return Domain(
        has_denominator=any(c.operator == "!=" and c.right == "0" for c in raw),
        has_radical=any(c.operator == ">=" for c in raw),
        has_logarithm=any(c.operator == ">" for c in raw),
        conditions=tuple(solve_condition(c) for c in raw),
    )
