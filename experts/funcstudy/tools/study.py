"""Function study — surface validation plus the domain and limit queries."""

import logging
import re
from dataclasses import dataclass

from .domain import Domain, domain as analyze_domain
from .errors import InvalidCharacter, InvalidExpression
from .evaluator import FUNCTIONS, VARIABLE
from .limits import LimitResult, limits as analyze_limits

logger = logging.getLogger(__name__)

_DISALLOWED_RE = re.compile(r"[^0-9a-zA-Z+\-*/^().,√\s]")
_TOKEN_RE = re.compile(r"""
    (?P<space>\s+)
  | (?P<number>[0-9.]+)
  | (?P<name>[a-zA-Z]+)
  | (?P<radical>√)
  | (?P<open>\()
  | (?P<close>\))
  | (?P<op>[-+*/^])
  | (?P<other>.)
""", re.VERBOSE)

# Operand-class tokens that may directly follow an operand (implicit multiplication).
_IMPLICIT = {
    "number": {"variable", "call", "open"},
    "close": {"number", "variable", "call", "open"},
}


def _check_parentheses(expression):
    depth = 0
    for ch in expression:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise InvalidExpression("Unbalanced parentheses")
    if depth != 0:
        raise InvalidExpression("Unbalanced parentheses")


def _classify(kind, text):
    if kind == "radical":
        return "call"
    if kind == "name":
        if text == VARIABLE:
            return "variable"
        if text in FUNCTIONS:
            return "call"
        raise InvalidExpression(f"Unknown identifier {text!r}; the only variable is {VARIABLE!r}")
    return kind


def validate_expression(expression: str) -> None:
    """Reject malformed input before any analysis runs.

    Operands (numbers, x, calls, '(') and operators ('+ - * / ^', ')') must
    alternate. Two operands may touch only as implicit multiplication:
    2x, 2(x), 2sqrt(x), (x)(x), (x)2.
    """
    if not isinstance(expression, str) or not expression.strip():
        raise InvalidExpression("Expression is empty")

    bad = _DISALLOWED_RE.search(expression)
    if bad:
        raise InvalidCharacter(f"Disallowed character {bad.group()!r} in expression")

    _check_parentheses(expression)

    expect_operand = True
    prev = None
    adjacent = False
    pending_call = None

    for m in _TOKEN_RE.finditer(expression):
        kind, text = m.lastgroup, m.group()
        if kind == "space":
            adjacent = False
            continue

        if pending_call and kind != "open":
            raise InvalidExpression(f"Function {pending_call!r} must be followed by '('")
        pending_call = None

        kind = _classify(kind, text)
        implicit = adjacent and kind in _IMPLICIT.get(prev, ())

        if kind in ("number", "variable"):
            if kind == "number" and (text.count(".") > 1 or text == "."):
                raise InvalidExpression(f"Invalid decimal number {text!r}")
            if not expect_operand and not implicit:
                raise InvalidExpression("Missing operator between two terms")
            expect_operand = False

        elif kind == "call":
            if not expect_operand and not implicit:
                raise InvalidExpression(f"Missing operator before {text!r}")
            pending_call = text
            expect_operand = True

        elif kind == "open":
            if not expect_operand and not implicit:
                raise InvalidExpression("Missing operator before '('")
            expect_operand = True

        elif kind == "close":
            if expect_operand:
                raise InvalidExpression("Parenthesis or operator in invalid position")
            expect_operand = False

        elif kind == "op":
            if expect_operand and text not in "+-":
                raise InvalidExpression(f"Operator {text!r} in invalid position")
            expect_operand = True

        else:
            raise InvalidExpression(f"Invalid syntax near {text!r}")

        prev = kind
        adjacent = True

    if pending_call:
        raise InvalidExpression(f"Function {pending_call!r} must be followed by '('")
    if expect_operand:
        raise InvalidExpression("Incomplete expression")


@dataclass(frozen=True)
class FuncStudyResult:
    expression: str
    domain: Domain
    limits: LimitResult

    def to_dict(self) -> dict:
        return {
            "expression": self.expression,
            "domain": self.domain.to_dict(),
            "limits": self.limits.to_dict(),
        }


class FuncStudy:
    """Study of a single-variable real function given as text.

    The expression is validated at construction; domain(), limit() and
    resolve() recompute their results on every call.
    """

    def __init__(self, expression: str):
        validate_expression(expression)
        self._expression = expression

    @property
    def expression(self) -> str:
        return self._expression

    def domain(self) -> Domain:
        return analyze_domain(self._expression)

    def limit(self) -> LimitResult:
        return analyze_limits(self._expression)

    def resolve(self) -> FuncStudyResult:
        logger.debug("resolving %r", self._expression)
        return FuncStudyResult(
            expression=self._expression,
            domain=self.domain(),
            limits=self.limit(),
        )

    def __repr__(self):
        return f"FuncStudy({self._expression!r})"
