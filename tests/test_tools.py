"""Unit tests for the FuncStudy tools.

Run:  uv run python -m tests.test_tools
"""

import sys
if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

import logging

from experts.funcstudy.config import load_settings
from experts.funcstudy.tools import basics
from experts.funcstudy.tools.algebra import evaluate_readable, math_tool
from experts.funcstudy.tools.calculus import calculus_tool
from experts.funcstudy.tools.errors import DivisionByZero, EvaluationFailure, InvalidNumber

TOTAL = 0
PASSED = 0


def check(label, result, key, expected):
    global TOTAL, PASSED
    TOTAL += 1
    actual = result.get(key)
    ok = actual == expected
    PASSED += ok
    print(f"  {'[PASS]' if ok else '[FAIL]'}  {label}")
    if not ok:
        print(f"         Expected {key}={expected!r}")
        print(f"         Got      {key}={actual!r}")
    assert ok, f"{label}: expected {key}={expected!r}, got {key}={actual!r}"


def check_raises(label, fn, error):
    try:
        fn()
        got = None
    except error:
        got = error
    except Exception as e:
        got = type(e)
    check(label, {"raised": got}, "raised", error)


# ── Arithmetic ─────────────────────────────────────────

def test_math_tool():
    print("\n--- math_tool --------------------------------------------")
    check("compute integer",    math_tool("347*892"),                    "result", "309524")
    check("compute fraction",   math_tool("1/3 + 1/6"),                  "result", "1/2")
    check("compute radical",    math_tool("√(144)"),                     "result", "12")
    check("compute at point",   math_tool("x^2", point="3"),             "result", "9")
    check("compute numeric",    math_tool("7/2"),                        "numeric", 3.5)
    check("add",                math_tool("2, 3", "add"),                "result", 5.0)
    check("sub",                math_tool("2, 3", "sub"),                "result", -1.0)
    check("mul readable",       math_tool("1.5, 3", "mul"),              "readable", "9/2")
    check("pow",                math_tool("2, 10", "pow"),               "result", 1024.0)
    check("div",                math_tool("6, 4", "div"),                "result", 1.5)
    check("div readable",       math_tool("6, 4", "div"),                "readable", "3/2")
    check("div label",          math_tool("6, 4", "div"),                "operation", "6 / 4")
    check("readable helper",    {"r": evaluate_readable("x/4", {"x": 2})}, "r", "1/2")


def test_math_tool_errors():
    print("\n--- math_tool (errors) -----------------------------------")
    check("div by zero",        math_tool("1, 0", "div"),                "kind", "DivisionByZero")
    check("div by zero status", math_tool("1, 0", "div"),                "status", 400)
    check("bad operand",        math_tool("a, 1", "add"),                "kind", "InvalidNumber")
    check("operand count",      math_tool("1, 2, 3", "add"),             "status", 400)
    check("complex power",      math_tool("-8, 0.5", "pow"),             "kind", "EvaluationFailure")
    check("bad expression",     math_tool("2$"),                         "code", "invalid_character")
    check("undefined value",    math_tool("1/0"),                        "kind", "EvaluationFailure")
    check("bad point",          math_tool("x", point="abc"),             "status", 400)
    check("unknown op",         math_tool("1, 2", "gcd"),                "status", 400)


# ── Calculus ───────────────────────────────────────────

def test_calculus_tool():
    print("\n--- calculus_tool ----------------------------------------")
    check("domain",             calculus_tool("1/(x-3)", "domain"),      "conditions", ["x != 3"])
    check("domain flags",       calculus_tool("log(x)", "domain"),       "has_logarithm", True)
    check("limit at +inf",      calculus_tool("x^2", "limit"),           "at_plus_infinity", "+∞")
    check("resolve expression", calculus_tool("√(x-1)"),                 "expression", "√(x-1)")
    check("resolve domain",     calculus_tool("√(x-1)"),                 "domain", {
        "has_denominator": False, "has_radical": True, "has_logarithm": False,
        "conditions": ["x >= 1"],
    })
    check("evaluate",           calculus_tool("1/(x-2)", "evaluate", "3"), "result", "1")
    check("evaluate fraction",  calculus_tool("x/3", "evaluate", "2"),   "result", "2/3")
    check("evaluate point",     calculus_tool("x", "evaluate", "0.5"),   "point", "1/2")


def test_calculus_tool_errors():
    print("\n--- calculus_tool (errors) -------------------------------")
    check("invalid expression", calculus_tool("2 3"),                    "kind", "InvalidExpression")
    check("unknown identifier", calculus_tool("y+1"),                    "code", "invalid_expression")
    check("unsolvable",         calculus_tool("1/(x^3-x)", "domain"),    "code", "unsolvable_condition")
    check("unsolvable status",  calculus_tool("1/(x^3-x)"),              "status", 400)
    check("pole",               calculus_tool("1/(x-2)", "evaluate", "2"), "kind", "EvaluationFailure")
    check("missing point",      calculus_tool("x", "evaluate"),          "status", 400)
    check("bad point",          calculus_tool("x", "evaluate", "abc"),   "status", 400)
    check("unknown op",         calculus_tool("x", "derivative"),        "status", 400)
    check("error echoes input", calculus_tool("sqrt x"),                 "expression", "sqrt x")
    check("nan point",          calculus_tool("x", "evaluate", "nan"),   "status", 400)
    check("nan point kind",     calculus_tool("x", "evaluate", "nan"),   "kind", "InvalidVariableValue")
    check("infinite point",     calculus_tool("1/x", "evaluate", "inf"), "status", 400)


# ── Basics ─────────────────────────────────────────────

def test_basics():
    print("\n--- basics -----------------------------------------------")
    check("numeric strings",    {"r": basics.add("1.5", "2")},           "r", 3.5)
    check("power",              {"r": basics.power(9, 0.5)},             "r", 3.0)
    check("not a number",       {"r": basics.to_finite_number("abc")},   "r", None)
    check("bool rejected",      {"r": basics.to_finite_number(True)},    "r", None)
    check("infinite rejected",  {"r": basics.to_finite_number("inf")},   "r", None)
    check_raises("divisor 0",   lambda: basics.div(1, 0),                DivisionByZero)
    check_raises("nan operand", lambda: basics.mul("nan", 2),            InvalidNumber)
    check_raises("overflow",    lambda: basics.mul(1e308, 10),           EvaluationFailure)
    check_raises("zero to negative", lambda: basics.power(0, -1),        EvaluationFailure)


# ── Config ─────────────────────────────────────────────

def test_settings():
    print("\n--- load_settings ----------------------------------------")
    s = load_settings({})
    check("default level",      vars(s),                                 "log_level", logging.INFO)
    check("default port",       vars(s),                                 "ui_port", 7861)

    s = load_settings({"FUNCSTUDY_LOG_LEVEL": "debug", "FUNCSTUDY_UI_PORT": "9000",
                       "FUNCSTUDY_UI_HOST": "127.0.0.1", "FUNCSTUDY_SHARE": "yes"})
    check("level from env",     vars(s),                                 "log_level", logging.DEBUG)
    check("port from env",      vars(s),                                 "ui_port", 9000)
    check("host from env",      vars(s),                                 "ui_host", "127.0.0.1")
    check("share flag",         vars(s),                                 "share", True)
    check("unknown level",      vars(load_settings({"FUNCSTUDY_LOG_LEVEL": "loud"})), "log_level", logging.INFO)


if __name__ == "__main__":
    print("=" * 52)
    print("  FuncStudy -- Tool Tests")
    print("=" * 52)

    test_math_tool()
    test_math_tool_errors()
    test_calculus_tool()
    test_calculus_tool_errors()
    test_basics()
    test_settings()

    print("\n" + "=" * 52)
    print(f"  {PASSED}/{TOTAL} passed")
    print("=" * 52)
