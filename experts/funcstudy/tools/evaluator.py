"""Expression evaluator — recursive-descent parser and tree-walking evaluator.

Grammar (preprocessed syntax):
    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/') unary)*
    unary  := ('+' | '-') unary | power
    power  := atom ('**' unary)?
    atom   := NUMBER | NAME | NAME '(' expr ')' | '(' expr ')'

The grammar is closed: sqrt, ln and log are the only callables and x is the
only free variable. Every node result must be a finite real number.
"""

import math
import operator
import re
from dataclasses import dataclass

from .errors import EvaluationFailure, InvalidVariableValue
from .preprocess import preprocess

VARIABLE = "x"

FUNCTIONS = {
    "sqrt": math.sqrt,
    "ln": math.log,
    "log": math.log10,
}

_BINARY = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "**": operator.pow,
}

_TOKEN_RE = re.compile(r"""
    \s*(?:
        (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
      | (?P<name>[a-zA-Z_][a-zA-Z0-9_]*)
      | (?P<op>\*\*|[-+*/()])
    )""", re.VERBOSE)


def _finite(value, where):
    if isinstance(value, complex) or not math.isfinite(value):
        raise EvaluationFailure(f"Non-finite result in {where}")
    return value


# ── Tree nodes ─────────────────────────────────────────

@dataclass(frozen=True)
class Number:
    value: float

    def evaluate(self, scope):
        return self.value


@dataclass(frozen=True)
class Variable:
    name: str

    def evaluate(self, scope):
        try:
            return scope[self.name]
        except KeyError:
            raise EvaluationFailure(f"Unbound variable: {self.name}") from None


@dataclass(frozen=True)
class Negate:
    operand: object

    def evaluate(self, scope):
        return -self.operand.evaluate(scope)


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: object
    right: object

    def evaluate(self, scope):
        a = self.left.evaluate(scope)
        b = self.right.evaluate(scope)
        try:
            result = _BINARY[self.op](a, b)
        except (ZeroDivisionError, OverflowError, ValueError) as e:
            raise EvaluationFailure(f"{a!r} {self.op} {b!r}: {e}") from e
        return _finite(result, f"{a!r} {self.op} {b!r}")


@dataclass(frozen=True)
class Call:
    func: str
    argument: object

    def evaluate(self, scope):
        arg = self.argument.evaluate(scope)
        try:
            result = FUNCTIONS[self.func](arg)
        except (ValueError, OverflowError) as e:
            raise EvaluationFailure(f"{self.func}({arg!r}): {e}") from e
        return _finite(result, f"{self.func}({arg!r})")


# ── Tokenizer / parser ─────────────────────────────────

def tokenize(text: str) -> list[tuple[str, str]]:
    """Split preprocessed text into (kind, text) tokens."""
    tokens = []
    text = text.rstrip()
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if not m:
            raise EvaluationFailure(f"Unexpected character {text[pos]!r} at position {pos}")
        tokens.append((m.lastgroup, m.group(m.lastgroup)))
        pos = m.end()
    return tokens


class _Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def parse(self):
        node = self._expr()
        if self.pos != len(self.tokens):
            raise EvaluationFailure(f"Unexpected token {self.tokens[self.pos][1]!r}")
        return node

    def _peek_op(self, *ops):
        if self.pos < len(self.tokens):
            kind, text = self.tokens[self.pos]
            return kind == "op" and text in ops
        return False

    def _take(self):
        if self.pos >= len(self.tokens):
            raise EvaluationFailure("Unexpected end of expression")
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _expect(self, op):
        if not self._peek_op(op):
            raise EvaluationFailure(f"Expected {op!r}")
        self.pos += 1

    def _expr(self):
        node = self._term()
        while self._peek_op("+", "-"):
            op = self._take()[1]
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self):
        node = self._unary()
        while self._peek_op("*", "/"):
            op = self._take()[1]
            node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self):
        if self._peek_op("+", "-"):
            op = self._take()[1]
            operand = self._unary()
            return Negate(operand) if op == "-" else operand
        return self._power()

    def _power(self):
        base = self._atom()
        if self._peek_op("**"):
            self.pos += 1
            return BinaryOp("**", base, self._unary())
        return base

    def _atom(self):
        kind, text = self._take()

        if kind == "number":
            return Number(_finite(float(text), f"literal {text}"))

        if kind == "name":
            if self._peek_op("("):
                if text not in FUNCTIONS:
                    raise EvaluationFailure(f"Unknown function: {text}")
                self.pos += 1
                arg = self._expr()
                self._expect(")")
                return Call(text, arg)
            if text in FUNCTIONS:
                raise EvaluationFailure(f"Function {text} requires an argument")
            return Variable(text)

        if text == "(":
            node = self._expr()
            self._expect(")")
            return node

        raise EvaluationFailure(f"Unexpected token {text!r}")


def parse(normalized: str):
    """Parse preprocessed text into an expression tree."""
    return _Parser(tokenize(normalized)).parse()


# ── Public API ─────────────────────────────────────────

class CompiledExpression:
    """An expression parsed once and evaluated at many values of x."""

    def __init__(self, expression: str):
        self.expression = expression
        self.normalized = preprocess(expression)
        self.tree = parse(self.normalized)

    def __call__(self, x: float) -> float:
        x = float(x)
        if not math.isfinite(x):
            raise InvalidVariableValue(f"Invalid value for variable {VARIABLE}: {x!r}")
        return self.tree.evaluate({VARIABLE: x})

    def safe(self, x: float):
        """Value at x, or None where the expression is undefined."""
        try:
            return self(x)
        except EvaluationFailure:
            return None

    def __repr__(self):
        return f"CompiledExpression({self.expression!r})"


def compile_expression(expression: str) -> CompiledExpression:
    return CompiledExpression(expression)


def evaluate(expression: str, variables: dict = None) -> float:
    """Evaluate an expression with its variables substituted as literals."""
    if not expression or not expression.strip():
        raise EvaluationFailure("Empty expression")
    return parse(preprocess(expression, variables)).evaluate({})
