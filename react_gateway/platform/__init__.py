"""Platform infrastructure module.

This module provides the core infrastructure for the gateway service:
- Agent protocol, configuration and message types
- Resilient completion client and event streaming
- FastAPI server configuration
- Observability utilities
"""

from react_gateway.platform.agent import (
    Agent,
    AgentConfig,
    AgentIdentity,
    Completion,
    LlmConfig,
    Message,
    RetryingCompletionClient,
    RetryPolicy,
    StepEvent,
    StreamingGateway,
)
from react_gateway.platform.settings import Settings

__all__ = [
    # Core protocols
    "Agent",
    # Configuration
    "AgentConfig",
    "AgentIdentity",
    "LlmConfig",
    "RetryPolicy",
    "Settings",
    # Completion and streaming
    "RetryingCompletionClient",
    "StreamingGateway",
    # Message types
    "Completion",
    "Message",
    "StepEvent",
]
