"""Shared fixtures: scripted providers, fake sleepers and recording contexts."""

from collections.abc import Sequence

import pytest

from react_gateway.platform.agent.events import ExecutionContext
from react_gateway.platform.agent.messages import (
    AssistantMessage,
    Completion,
    Message,
    StepEvent,
    ToolCall,
)


class ScriptedProvider:
    """Completion provider that replays a script of results and failures.

    Each entry is either a Completion to return or an exception to raise.
    Every call's messages are recorded in ``calls``.
    """

    model_name = "test/model"

    def __init__(self, script: Sequence[Completion | Exception]):
        self._script = list(script)
        self.calls: list[list[Message]] = []

    async def generate(self, messages, tools=None) -> Completion:
        self.calls.append(list(messages))
        outcome = self._script.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeSleeper:
    """Records requested sleeps without waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def text_completion(text: str) -> Completion:
    return Completion(message=AssistantMessage(text=text))


def tool_completion(*calls: ToolCall, text: str | None = None) -> Completion:
    return Completion(message=AssistantMessage(text=text, tool_calls=calls))


@pytest.fixture
def sleeper() -> FakeSleeper:
    return FakeSleeper()


@pytest.fixture
def recorded_events() -> list[StepEvent]:
    return []


@pytest.fixture
def context(recorded_events: list[StepEvent]) -> ExecutionContext:
    """Execution context whose only subscriber records events."""
    ctx = ExecutionContext(task_id="test-task")
    ctx.register(recorded_events.append)
    return ctx


@pytest.fixture
def make_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider


@pytest.fixture
def completions():
    """Helpers building provider completions."""

    class Completions:
        text = staticmethod(text_completion)
        tools = staticmethod(tool_completion)

    return Completions
