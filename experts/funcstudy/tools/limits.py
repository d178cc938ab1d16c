"""Limits estimated by directional sampling at infinity and around critical points.

Limits are estimated, not proven: a monotonic sequence of sample points is
evaluated and the tail of the resulting values decides between divergence,
convergence and "undetermined".
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .domain import (
    COEFFICIENT_EPS, DomainCondition, build_conditions,
    linear_coefficients, quadratic_coefficients, real_roots,
)
from .errors import StudyError
from .evaluator import compile_expression
from .readable import parse_readable, to_readable

logger = logging.getLogger(__name__)

PLUS_INFINITY: Final[str] = "+∞"
MINUS_INFINITY: Final[str] = "-∞"
UNDEFINED: Final[str] = "undefined"
UNDETERMINED: Final[str] = "undetermined"

INFINITY_SAMPLES: Final[tuple] = (1e2, 1e3, 1e4, 1e5, 1e6, 1e7)
INFINITY_MAGNITUDE: Final[float] = 1e8
INFINITY_CONVERGENCE: Final[float] = 1e-6

POINT_STEPS: Final[tuple] = (1e-1, 1e-2, 1e-3, 1e-4, 1e-5, 1e-6, 1e-7)
POINT_MAGNITUDE: Final[float] = 1e6
POINT_CONVERGENCE: Final[float] = 1e-5

MIN_SAMPLES: Final[int] = 3
CRITICAL_POINT_TOL: Final[float] = 1e-9
ROOT_EPS: Final[float] = 1e-12
JUMP_TOL: Final[float] = 1e-7
CONTINUITY_TOL: Final[float] = 1e-6

_INFINITIES = (PLUS_INFINITY, MINUS_INFINITY)


class DiscontinuityKind(str, Enum):
    CONTINUOUS = "continuous"
    REMOVABLE = "removable (third kind)"
    JUMP = "jump (first kind)"
    INFINITE = "infinite (second kind)"
    OSCILLATORY = "oscillatory (second kind)"


@dataclass(frozen=True)
class PointLimit:
    point: str
    left: str
    right: str
    kind: DiscontinuityKind

    def to_dict(self) -> dict:
        return {"point": self.point, "left": self.left, "right": self.right,
                "kind": self.kind.value}


@dataclass(frozen=True)
class LimitResult:
    at_minus_infinity: str
    at_plus_infinity: str
    at_critical_points: tuple

    def to_dict(self) -> dict:
        return {
            "at_minus_infinity": self.at_minus_infinity,
            "at_plus_infinity": self.at_plus_infinity,
            "at_critical_points": [p.to_dict() for p in self.at_critical_points],
        }


# ── Critical points ────────────────────────────────────

def _zeros(condition: DomainCondition) -> list[float]:
    try:
        fn = compile_expression(condition.expression)
    except StudyError as e:
        logger.debug("skipping condition %s: %s", condition, e.message)
        return []

    lin = linear_coefficients(fn)
    if lin is not None and abs(lin.a) >= ROOT_EPS:
        return [-lin.b / lin.a]

    quad = quadratic_coefficients(fn)
    if quad is None:
        logger.debug("no critical point recovered from %s", condition)
        return []
    return real_roots(quad, ROOT_EPS)


def unique_by_tolerance(values, tol: float = CRITICAL_POINT_TOL) -> list[float]:
    out = []
    for v in values:
        if not any(abs(u - v) < tol for u in out):
            out.append(v)
    return out


def critical_points(conditions) -> list[float]:
    """Sorted, deduplicated zeros of the domain conditions."""
    points = [p for c in conditions for p in _zeros(c)]
    return sorted(unique_by_tolerance(points))


# ── Sampling ───────────────────────────────────────────

def max_abs_diff(values) -> float:
    """Largest gap between consecutive values."""
    return max((abs(b - a) for a, b in zip(values, values[1:])), default=0.0)


def _finite_samples(fn, xs):
    return [v for v in (fn.safe(x) for x in xs) if v is not None]


def limit_at_infinity(fn, direction: int) -> str:
    """Limit as x -> direction * infinity (direction is +1 or -1)."""
    values = _finite_samples(fn, (direction * v for v in INFINITY_SAMPLES))
    if len(values) < MIN_SAMPLES:
        return UNDETERMINED

    tail = values[-MIN_SAMPLES:]
    if all(abs(v) > INFINITY_MAGNITUDE for v in tail):
        return PLUS_INFINITY if tail[-1] >= 0 else MINUS_INFINITY
    if max_abs_diff(tail) < INFINITY_CONVERGENCE:
        return to_readable(tail[-1])
    return UNDETERMINED


def one_sided_limit(fn, point: float, side: int) -> str:
    """Limit as x -> point from the left (side -1) or the right (side +1)."""
    values = _finite_samples(fn, (point + side * eps for eps in POINT_STEPS))
    if len(values) < MIN_SAMPLES:
        return UNDEFINED

    t0, t1, t2 = values[-MIN_SAMPLES:]
    if abs(t2) > POINT_MAGNITUDE and abs(t2) > abs(t1) > abs(t0):
        return PLUS_INFINITY if t2 > 0 else MINUS_INFINITY
    if max_abs_diff((t0, t1, t2)) < POINT_CONVERGENCE:
        return to_readable(t2)
    return UNDETERMINED


def classify_discontinuity(left: str, right: str, value_at_point) -> DiscontinuityKind:
    """Kind of discontinuity from the one-sided limits and the value at the point.

    value_at_point is None where the function is undefined at the point.
    """
    if {left, right} & {UNDEFINED, UNDETERMINED}:
        return DiscontinuityKind.OSCILLATORY
    if left in _INFINITIES or right in _INFINITIES:
        return DiscontinuityKind.INFINITE

    left_num = parse_readable(left)
    right_num = parse_readable(right)
    if left_num is None or right_num is None:
        return DiscontinuityKind.OSCILLATORY

    if abs(left_num - right_num) >= JUMP_TOL:
        return DiscontinuityKind.JUMP
    if value_at_point is None:
        return DiscontinuityKind.REMOVABLE
    if abs(value_at_point - left_num) < CONTINUITY_TOL:
        return DiscontinuityKind.CONTINUOUS
    return DiscontinuityKind.REMOVABLE


def limits(expression: str) -> LimitResult:
    """Limits at both infinities and at every critical point of expression."""
    fn = compile_expression(expression)

    at_points = []
    for p in critical_points(build_conditions(expression)):
        left = one_sided_limit(fn, p, -1)
        right = one_sided_limit(fn, p, 1)
        at_points.append(PointLimit(
            point=to_readable(p),
            left=left,
            right=right,
            kind=classify_discontinuity(left, right, fn.safe(p)),
        ))

    return LimitResult(
        at_minus_infinity=limit_at_infinity(fn, -1),
        at_plus_infinity=limit_at_infinity(fn, 1),
        at_critical_points=tuple(at_points),
    )
