"""Unit tests for expression validation and the FuncStudy facade.

Run:  uv run python -m tests.test_study
"""

import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

from dataclasses import FrozenInstanceError

from experts.funcstudy.tools.errors import (
    InvalidCharacter, InvalidExpression, UnsolvableCondition,
)
from experts.funcstudy.tools.study import FuncStudy, validate_expression

TOTAL = 0
PASSED = 0


def check(label, actual, expected):
    global TOTAL, PASSED
    TOTAL += 1
    ok = actual == expected
    PASSED += ok
    print(f"  {'[PASS]' if ok else '[FAIL]'}  {label}")
    if not ok:
        print(f"         Expected {expected!r}")
        print(f"         Got      {actual!r}")
    assert ok, f"{label}: expected {expected!r}, got {actual!r}"


def check_raises(label, fn, error):
    try:
        fn()
        got = None
    except error:
        got = error
    except Exception as e:
        got = type(e)
    check(label, got, error)


# ── Validation ─────────────────────────────────────────

REJECTED = [
    ("empty", ""),
    ("blank", "   "),
    ("dangling operators", "2++"),
    ("unclosed paren", "(1+2"),
    ("numbers apart", "2 3"),
    ("stray close", "1+2)"),
    ("reversed parens", ")("),
    ("trailing operator", "2*"),
    ("leading operator", "*2"),
    ("two variables", "x y"),
    ("unknown variable", "y+1"),
    ("call without paren", "sqrt x"),
    ("bare function", "sqrt"),
    ("double decimal point", "2..3"),
    ("comma", "1,2"),
    ("variable before paren", "x(x+1)"),
    ("empty group", "()"),
    ("coefficient apart", "2 x"),
]

ACCEPTED = [
    "2*3", "2(3)", "2x", "√(x-1)", "sqrt(x)", "log(x)+ln(x)", "(x+1)(x-1)",
    "-x^2", "x^-1", "2sqrt(x)", "(x)2", " x + 1 ", "3.5x", "5.x", "2.(x+1)",
]


def test_validation():
    print("\n--- validate_expression ----------------------------------")
    for label, text in REJECTED:
        check_raises(label, lambda: validate_expression(text), InvalidExpression)
    check_raises("disallowed character", lambda: validate_expression("2$"), InvalidCharacter)

    for text in ACCEPTED:
        check(f"accepts {text!r}", validate_expression(text), None)


# ── FuncStudy ──────────────────────────────────────────

def test_resolve():
    print("\n--- FuncStudy.resolve ------------------------------------")
    study = FuncStudy("1/(x-2)")
    check("expression kept",        study.expression,                   "1/(x-2)")
    check("full result", study.resolve().to_dict(), {
        "expression": "1/(x-2)",
        "domain": {
            "has_denominator": True,
            "has_radical": False,
            "has_logarithm": False,
            "conditions": ["x != 2"],
        },
        "limits": {
            "at_minus_infinity": "undetermined",
            "at_plus_infinity": "undetermined",
            "at_critical_points": [
                {"point": "2", "left": "-∞", "right": "+∞", "kind": "infinite (second kind)"},
            ],
        },
    })

    check("domain only",            FuncStudy("√(x-1)").domain().conditions, ("x >= 1",))
    check("repeatable",             study.resolve(),                    study.resolve())

    check("trailing dot resolves",  FuncStudy("1/(2.x-4)").resolve().domain.conditions, ("x != 2",))
    check("trailing dot limits",    FuncStudy("2.(x+1)").limit().at_critical_points, ())


def test_partial_results():
    print("\n--- unsolvable domain, estimable limits ------------------")
    study = FuncStudy("1/(x^3-x)")
    check_raises("domain fails",    study.domain,                       UnsolvableCondition)
    check_raises("resolve fails",   study.resolve,                      UnsolvableCondition)

    lim = study.limit()
    check("limit still works",      (lim.at_minus_infinity, lim.at_plus_infinity), ("0", "0"))
    check("no critical points",     lim.at_critical_points,             ())


def test_construction():
    print("\n--- construction -----------------------------------------")
    check_raises("rejected at init", lambda: FuncStudy("2 3"),          InvalidExpression)
    check("repr",                   repr(FuncStudy("x")),               "FuncStudy('x')")

    result = FuncStudy("x^2").resolve()

    def mutate():
        result.expression = "x"

    check_raises("frozen result",   mutate,                             FrozenInstanceError)


if __name__ == "__main__":
    print("=" * 52)
    print("  FuncStudy -- Study Tests")
    print("=" * 52)

    test_validation()
    test_resolve()
    test_partial_results()
    test_construction()

    print("\n" + "=" * 52)
    print(f"  {PASSED}/{TOTAL} passed")
    print("=" * 52)
