"""Configuration dataclasses for agent components.

This module provides immutable configuration objects for LLM clients,
the completion retry policy, and agent behavior settings.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LlmConfig:
    """Configuration for language model clients.

    Attributes:
        model: LiteLLM model identifier (e.g., "dashscope/qwen-turbo", "openai/gpt-4o-mini")
        api_key: API key for the LLM provider
        base_url: Base URL for the API (e.g., an OpenAI-compatible endpoint)
        temperature: Sampling temperature (0.0 to 1.0)
        request_timeout: Timeout of a single provider round trip, in seconds
    """

    model: str
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.7
    request_timeout: float = 60.0


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for rate-limited provider calls.

    Attributes:
        max_attempts: Total provider attempts per completion, including the first
        base_delay_ms: Delay after the first failed attempt, in milliseconds
        backoff_multiplier: Factor applied to the delay after each further failure
    """

    max_attempts: int = 3
    base_delay_ms: int = 2000
    backoff_multiplier: int = 2

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must not be negative")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be at least 1")

    def delay_ms(self, attempt: int) -> int:
        """Delay to wait after the given (1-based) failed attempt."""
        return self.base_delay_ms * self.backoff_multiplier ** (attempt - 1)

    def can_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts


@dataclass(frozen=True)
class AgentConfig:
    """Configuration for agent behavior.

    Attributes:
        max_iterations: Maximum model turns before giving up on a task
        max_messages: Conversation window size; older tool turns are dropped
            (the system message and the task are always kept)
    """

    max_iterations: int = 15
    max_messages: int = 10

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.max_messages < 2:
            raise ValueError("max_messages must be at least 2")


@dataclass(frozen=True)
class AgentIdentity:
    """Identity information for an agent.

    Attributes:
        name: Human-readable display name for the agent
        description: Brief description of the agent's capabilities
        slug: URL-safe identifier used in API routes
    """

    name: str
    description: str
    slug: str
