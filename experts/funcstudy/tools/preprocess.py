"""Expression preprocessor — rewrites raw input into the evaluator's grammar.

Handles:  √( → sqrt(,  ^ → **,  2x → 2*x,  2(x) → 2*(x),  (x+1)(x-1) → (x+1)*(x-1),
          )x → )*x
Also:     variable bindings, substituted as parenthesized literals (x → (3)).
Only characters in [0-9a-zA-Z+-*/^().,√] survive; anything else is rejected.
"""

import math
import re

from .errors import InvalidCharacter, InvalidVariableName, InvalidVariableValue

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^0-9a-zA-Z+\-*/^().,√\s]")
_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9_]*")

# ln( and log( keep their names; the evaluator binds them to natural and base-10 log.
_ALIASES = (
    (re.compile(r"√\("), "sqrt("),
    (re.compile(r"\^"), "**"),
)

_IMPLICIT_MUL = (
    # A trailing dot stays with its number: 5.x -> 5.*x
    (re.compile(r"(\d\.?)([a-zA-Z])"), r"\1*\2"),
    (re.compile(r"(\d\.?)(\()"), r"\1*\2"),
    (re.compile(r"(\))([a-zA-Z0-9])"), r"\1*\2"),
    (re.compile(r"(\))(\()"), r"\1*\2"),
)


def preprocess(expression: str, variables: dict = None) -> str:
    """Convert natural math notation to the evaluator's canonical syntax.

    Bindings in `variables` replace every whole-word occurrence of the name
    with a parenthesized literal of the value.
    """
    s = _WHITESPACE_RE.sub("", expression)

    bad = _DISALLOWED_RE.search(s)
    if bad:
        raise InvalidCharacter(f"Disallowed character {bad.group()!r} in expression")

    for pattern, replacement in _ALIASES:
        s = pattern.sub(replacement, s)

    for pattern, replacement in _IMPLICIT_MUL:
        s = pattern.sub(replacement, s)

    for name, value in (variables or {}).items():
        s = _substitute(s, name, value)

    return s


def _substitute(s, name, value):
    if not isinstance(name, str) or not _NAME_RE.fullmatch(name):
        raise InvalidVariableName(f"Invalid variable name: {name!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidVariableValue(f"Invalid value for variable {name}: {value!r}")
    literal = f"({value!r})"
    return re.sub(rf"\b{re.escape(name)}\b", lambda _m: literal, s)
