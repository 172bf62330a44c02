"""Tools available to the ReAct agent."""

from .math import create_math_tools

__all__ = ["create_math_tools"]
