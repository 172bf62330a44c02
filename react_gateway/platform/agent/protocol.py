"""Agent protocol definitions.

This module defines the protocol the streaming gateway and HTTP routes expect
from a reasoning loop, so that agent implementations stay interchangeable.
"""

from typing import Protocol

from react_gateway.platform.agent.config import AgentIdentity
from react_gateway.platform.agent.events import ExecutionContext


class Agent(Protocol):
    """Protocol for an agent."""

    @property
    def identity(self) -> AgentIdentity:
        """The identity of the agent."""
        ...

    @property
    def name(self) -> str:
        """The name of the agent."""
        ...

    @property
    def slug(self) -> str:
        """The slug of the agent."""
        ...

    async def solve(self, task: str, context: ExecutionContext) -> str:
        """Run the reasoning loop for a task and return the final answer.

        Intermediate thought/action/observation events are published on
        ``context``; the final answer is returned, not published.

        Args:
            task: The user's task
            context: Execution context owned by the caller

        Returns:
            The final answer text
        """
        ...
