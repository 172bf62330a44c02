"""Framework-agnostic message and event types.

These types are used across all layers and define the common vocabulary for
agent execution: the conversation messages sent to the provider, the
completions it returns, and the step events streamed to observers.
"""

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model.

    Attributes:
        id: Provider-assigned identifier of the call
        name: Name of the tool to invoke
        arguments: Serialized JSON arguments, as returned by the provider
    """

    id: str
    name: str
    arguments: str


@dataclass(frozen=True)
class SystemMessage:
    """Instructions for the model."""

    role: ClassVar[str] = "system"

    text: str

    @property
    def is_void(self) -> bool:
        return False


@dataclass(frozen=True)
class UserMessage:
    """Input from the user (or a synthetic continuation prompt)."""

    role: ClassVar[str] = "user"

    text: str

    @property
    def is_void(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class AssistantMessage:
    """Model output: optional text plus zero or more tool calls."""

    role: ClassVar[str] = "assistant"

    text: str | None = None
    tool_calls: tuple[ToolCall, ...] = ()

    @property
    def is_void(self) -> bool:
        return not self.text and not self.tool_calls


@dataclass(frozen=True)
class ToolResultMessage:
    """The result of a tool invocation fed back to the model.

    Attributes:
        text: Tool output
        tool_call_id: ID of the tool call this message responds to
        tool_name: Name of the tool that produced the output
    """

    role: ClassVar[str] = "tool"

    text: str
    tool_call_id: str | None = None
    tool_name: str | None = None

    @property
    def is_void(self) -> bool:
        return False


type Message = SystemMessage | UserMessage | AssistantMessage | ToolResultMessage


@dataclass(frozen=True)
class Completion:
    """Result of a single model turn.

    Attributes:
        message: The assistant message produced by the provider
        input_tokens: Prompt tokens reported by the provider
        output_tokens: Completion tokens reported by the provider
        is_fallback: True when the message is a locally synthesized placeholder
            rather than provider output
    """

    message: AssistantMessage
    input_tokens: int = 0
    output_tokens: int = 0
    is_fallback: bool = False

    @property
    def text(self) -> str:
        return self.message.text or ""

    @property
    def tool_calls(self) -> tuple[ToolCall, ...]:
        return self.message.tool_calls

    @classmethod
    def fallback(cls, text: str) -> "Completion":
        """Build a placeholder completion carrying only text."""
        return cls(message=AssistantMessage(text=text), is_fallback=True)


class StepKind(StrEnum):
    """Kind of observable progress in a reasoning loop."""

    THOUGHT = "thought"
    ACTION = "action"
    OBSERVATION = "observation"
    FINAL_ANSWER = "final_answer"


_PAYLOAD_FIELDS: dict[StepKind, frozenset[str]] = {
    StepKind.THOUGHT: frozenset({"content"}),
    StepKind.ACTION: frozenset({"tool_name", "tool_input"}),
    StepKind.OBSERVATION: frozenset({"tool_output"}),
    StepKind.FINAL_ANSWER: frozenset({"content"}),
}


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class StepEvent:
    """One unit of observable progress (thought, action, observation, final answer).

    Exactly the payload fields belonging to ``kind`` are set; the others stay
    None. Use the factory classmethods rather than the constructor.

    Attributes:
        kind: Event kind
        content: Text for thought and final_answer events
        tool_name: Tool name for action events
        tool_input: Serialized tool arguments for action events
        tool_output: Tool result for observation events
        timestamp: Creation time in epoch milliseconds
    """

    kind: StepKind
    content: str | None = None
    tool_name: str | None = None
    tool_input: str | None = None
    tool_output: str | None = None
    timestamp: int = field(default_factory=_now_ms)

    def __post_init__(self) -> None:
        expected = _PAYLOAD_FIELDS[self.kind]
        for name in ("content", "tool_name", "tool_input", "tool_output"):
            is_set = getattr(self, name) is not None
            if is_set != (name in expected):
                raise ValueError(
                    f"{self.kind} event {'requires' if not is_set else 'does not accept'} '{name}'"
                )

    @classmethod
    def thought(cls, content: str) -> "StepEvent":
        return cls(kind=StepKind.THOUGHT, content=content)

    @classmethod
    def action(cls, tool_name: str, tool_input: str) -> "StepEvent":
        return cls(kind=StepKind.ACTION, tool_name=tool_name, tool_input=tool_input)

    @classmethod
    def observation(cls, tool_output: str) -> "StepEvent":
        return cls(kind=StepKind.OBSERVATION, tool_output=tool_output)

    @classmethod
    def final_answer(cls, content: str) -> "StepEvent":
        return cls(kind=StepKind.FINAL_ANSWER, content=content)

    def to_dict(self) -> dict[str, Any]:
        """Render the wire shape sent to streaming consumers."""
        return {
            "type": self.kind.value,
            "content": self.content,
            "toolName": self.tool_name,
            "toolInput": self.tool_input,
            "toolOutput": self.tool_output,
            "timestamp": self.timestamp,
        }
