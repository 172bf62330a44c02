"""Agent infrastructure module.

This module provides the core abstractions for running reasoning agents
against a model provider:
- Agent protocol definition
- Configuration dataclasses
- Message sequence repair and failure classification
- Retrying completion client and LiteLLM provider adapter
- Per-task step event publishing and SSE streaming
- Tool contract and registry
- Agent-specific metrics
"""

from react_gateway.platform.agent.completion import RetryingCompletionClient
from react_gateway.platform.agent.config import (
    AgentConfig,
    AgentIdentity,
    LlmConfig,
    RetryPolicy,
)
from react_gateway.platform.agent.errors import CompletionError, ErrorKind, classify_error
from react_gateway.platform.agent.events import EventPublisher, ExecutionContext
from react_gateway.platform.agent.llm_client import CompletionProvider, LlmClient
from react_gateway.platform.agent.messages import (
    AssistantMessage,
    Completion,
    Message,
    StepEvent,
    StepKind,
    SystemMessage,
    ToolCall,
    ToolResultMessage,
    UserMessage,
)
from react_gateway.platform.agent.protocol import Agent
from react_gateway.platform.agent.repair import repair_sequence
from react_gateway.platform.agent.streaming import ServerSentEvent, StreamingGateway
from react_gateway.platform.agent.tools import Tool, ToolParameter, ToolRegistry

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentIdentity",
    "LlmConfig",
    "RetryPolicy",
    "AssistantMessage",
    "Completion",
    "Message",
    "StepEvent",
    "StepKind",
    "SystemMessage",
    "ToolCall",
    "ToolResultMessage",
    "UserMessage",
    "repair_sequence",
    "CompletionError",
    "ErrorKind",
    "classify_error",
    "CompletionProvider",
    "LlmClient",
    "RetryingCompletionClient",
    "EventPublisher",
    "ExecutionContext",
    "ServerSentEvent",
    "StreamingGateway",
    "Tool",
    "ToolParameter",
    "ToolRegistry",
]
