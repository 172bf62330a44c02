"""LLM client implementation using LiteLLM."""

import json
import logging
from collections.abc import Sequence
from time import monotonic
from typing import Any, Protocol, assert_never

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, ToolMessage
from langchain_core.messages import SystemMessage as LcSystemMessage
from langchain_litellm import ChatLiteLLM

from react_gateway.platform.agent.config import LlmConfig
from react_gateway.platform.agent.messages import (
    AssistantMessage,
    Completion,
    Message,
    SystemMessage,
    ToolCall,
    ToolResultMessage,
    UserMessage,
)
from react_gateway.platform.agent.metrics import record_agent_tokens

logger = logging.getLogger(__name__)

type ToolSpec = dict[str, Any]

LOG_CONTENT_LIMIT = 500


class CompletionProvider(Protocol):
    """Protocol for a single, non-retrying provider round trip."""

    @property
    def model_name(self) -> str: ...

    async def generate(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpec] | None = None,
    ) -> Completion: ...


def _truncate(content: str | None) -> str:
    if content is None:
        return "(empty)"
    if len(content) > LOG_CONTENT_LIMIT:
        return f"{content[:LOG_CONTENT_LIMIT]}... ({len(content)} chars)"
    return content


class LlmClient:
    """LLM client that wraps ChatLiteLLM behind the CompletionProvider protocol.

    Provides a consistent interface for LLM interactions with:
    - Conversion between gateway messages and LangChain messages
    - Per-call tool binding (OpenAI function-calling specs)
    - Automatic token metrics recording
    - Request/response logging
    """

    def __init__(self, agent_slug: str, config: LlmConfig, llm=None):
        """Initialize the LLM client.

        Args:
            agent_slug: Slug of the owning agent, used for metrics labels
            config: Model, credentials and sampling settings
            llm: Optional pre-configured chat model (for testing)
        """
        self._agent_slug = agent_slug
        self._config = config
        self._llm = llm or ChatLiteLLM(
            model_name=config.model,
            api_key=config.api_key,
            api_base=config.base_url,
            temperature=config.temperature,
            request_timeout=config.request_timeout,
        )

    @property
    def model_name(self) -> str:
        """The model name/identifier."""
        return self._config.model

    @staticmethod
    def to_langchain(message: Message) -> BaseMessage:
        """Convert a gateway message to its LangChain counterpart."""
        match message:
            case SystemMessage(text=text):
                return LcSystemMessage(content=text)
            case UserMessage(text=text):
                return HumanMessage(content=text)
            case AssistantMessage(text=text, tool_calls=tool_calls):
                return AIMessage(
                    content=text or "",
                    tool_calls=[
                        {"id": call.id, "name": call.name, "args": _parse_arguments(call.arguments)}
                        for call in tool_calls
                    ],
                )
            case ToolResultMessage(text=text, tool_call_id=tool_call_id, tool_name=tool_name):
                return ToolMessage(content=text, tool_call_id=tool_call_id or "", name=tool_name)
            case _:
                assert_never(message)

    @staticmethod
    def from_langchain(message: AIMessage) -> AssistantMessage:
        """Convert a LangChain AIMessage to an AssistantMessage."""
        content = message.content
        if isinstance(content, list):
            content = " ".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        tool_calls = tuple(
            ToolCall(
                id=call.get("id") or "",
                name=call["name"],
                arguments=json.dumps(call.get("args", {}), ensure_ascii=False),
            )
            for call in message.tool_calls
        )
        return AssistantMessage(text=content or None, tool_calls=tool_calls)

    @staticmethod
    def extract_tokens(message: AIMessage) -> tuple[int, int]:
        """Extract token counts from an AIMessage's usage metadata.

        Args:
            message: AIMessage from LLM response

        Returns:
            Tuple of (input_tokens, output_tokens), defaults to (0, 0) if unavailable
        """
        usage = getattr(message, "usage_metadata", None)
        if not usage:
            return 0, 0
        return usage.get("input_tokens", 0), usage.get("output_tokens", 0)

    async def generate(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolSpec] | None = None,
    ) -> Completion:
        """Invoke the LLM once, without retries.

        Args:
            messages: Conversation to send, already in provider order
            tools: Optional OpenAI-style tool specs to bind for this call

        Returns:
            The provider's completion

        Raises:
            Exception: Whatever the underlying provider raises
        """
        llm = self._llm.bind_tools(list(tools)) if tools else self._llm
        logger.info(
            "LLM call: model=%s messages=%d tools=%d",
            self.model_name,
            len(messages),
            len(tools or ()),
        )
        for index, message in enumerate(messages, start=1):
            logger.debug("  [%d] %s: %s", index, message.role, _truncate(message.text))

        start_time = monotonic()
        response = await llm.ainvoke([self.to_langchain(message) for message in messages])
        duration_ms = (monotonic() - start_time) * 1000

        assistant = self.from_langchain(response)
        input_tokens, output_tokens = self.extract_tokens(response)
        record_agent_tokens(self._agent_slug, self.model_name, input_tokens, output_tokens)

        logger.info(
            "LLM response in %.0fms: %s",
            duration_ms,
            _truncate(assistant.text),
        )
        for call in assistant.tool_calls:
            logger.info("  tool request: %s %s", call.name, _truncate(call.arguments))

        return Completion(
            message=assistant,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )


def _parse_arguments(arguments: str) -> dict[str, Any]:
    # Replayed history only; malformed arguments are passed through as a raw string.
    try:
        parsed = json.loads(arguments) if arguments else {}
    except json.JSONDecodeError:
        return {"raw": arguments}
    return parsed if isinstance(parsed, dict) else {"raw": arguments}
