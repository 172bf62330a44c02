"""ReAct Agent module.

This module provides a tool-using reasoning agent that alternates model
turns and tool executions, with integer arithmetic tools built in.
"""

from .agent import ReActAgent, ReActAgentBuilder

__all__ = ["ReActAgent", "ReActAgentBuilder"]
