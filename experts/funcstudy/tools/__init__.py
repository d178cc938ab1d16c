from .algebra import math_tool
from .calculus import calculus_tool

__all__ = ["math_tool", "calculus_tool"]
