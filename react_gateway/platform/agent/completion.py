"""Retrying completion client.

Wraps a ``CompletionProvider`` with message repair, failure classification,
bounded exponential backoff for rate limiting, a safe fallback for
content-safety rejections, and step event publishing.

Each ``complete`` call runs a small state machine::

    Attempting(1) -> Succeeded
                  -> Fallback                (content-safety rejection, any attempt)
                  -> Attempting(2) -> ...    (rate limited, attempts left)
                  -> Fatal                   (rate limit exhausted, or any other failure)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from react_gateway.platform.agent.config import RetryPolicy
from react_gateway.platform.agent.errors import (
    CompletionError,
    ErrorClassifier,
    ErrorKind,
    default_classifier,
)
from react_gateway.platform.agent.events import ExecutionContext
from react_gateway.platform.agent.llm_client import CompletionProvider, ToolSpec
from react_gateway.platform.agent.messages import Completion, Message, StepEvent
from react_gateway.platform.agent.metrics import record_completion_attempt
from react_gateway.platform.agent.repair import repair_sequence

logger = logging.getLogger(__name__)

type Sleeper = Callable[[float], Awaitable[None]]

CONTENT_SAFETY_FALLBACK_TEXT = (
    "The request contains content that the model provider declined to process. "
    "Please adjust the input and try again."
)


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Succeeded:
    completion: Completion


@dataclass(frozen=True)
class Fallback:
    attempt: int
    cause: Exception


@dataclass(frozen=True)
class Fatal:
    attempt: int
    kind: ErrorKind
    cause: Exception


type CompletionState = Attempting | Succeeded | Fallback | Fatal


class RetryingCompletionClient:
    """Resilient front for a completion provider.

    Only ``ErrorKind.OTHER`` failures and exhausted rate limiting escape, as
    ``CompletionError``. Content-safety rejections are turned into a fixed
    fallback completion and never raise.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        policy: RetryPolicy | None = None,
        classifier: ErrorClassifier | None = None,
        sleep: Sleeper = asyncio.sleep,
        fallback_text: str = CONTENT_SAFETY_FALLBACK_TEXT,
    ):
        """Initialize the client.

        Args:
            provider: Provider performing a single round trip per attempt
            policy: Retry policy, defaults to 3 attempts with 2s/4s backoff
            classifier: Failure classifier, defaults to the structured + message chain
            sleep: Awaitable sleep taking seconds; inject a fake in tests
            fallback_text: Text returned when the provider rejects content
        """
        self._provider = provider
        self._policy = policy or RetryPolicy()
        self._classifier = classifier or default_classifier
        self._sleep = sleep
        self._fallback_text = fallback_text

    @property
    def model_name(self) -> str:
        return self._provider.model_name

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def complete(
        self,
        messages: Sequence[Message],
        context: ExecutionContext,
        tools: Sequence[ToolSpec] | None = None,
    ) -> Completion:
        """Run one model turn.

        Args:
            messages: Conversation so far; repaired before being sent
            context: Execution context receiving the step events
            tools: Optional tool specs offered to the model

        Returns:
            The provider completion, or the fallback completion on content rejection

        Raises:
            CompletionError: On a non-retryable failure or when retries are exhausted
            asyncio.CancelledError: If the task is cancelled, including during backoff
        """
        repaired = repair_sequence(messages)
        state: CompletionState = Attempting(1)

        while True:
            match state:
                case Attempting(attempt=attempt):
                    state = await self._attempt(attempt, repaired, tools)
                case Succeeded(completion=completion):
                    record_completion_attempt(self.model_name, "success")
                    self._publish_completion(completion, context)
                    return completion
                case Fallback(attempt=attempt, cause=cause):
                    record_completion_attempt(self.model_name, "fallback")
                    logger.warning(
                        "Provider rejected content on attempt %d, returning fallback: %s",
                        attempt,
                        cause,
                    )
                    context.publish(StepEvent.thought(self._fallback_text))
                    return Completion.fallback(self._fallback_text)
                case Fatal(attempt=attempt, kind=kind, cause=cause):
                    record_completion_attempt(self.model_name, "fatal")
                    logger.error(
                        "Completion failed after %d attempt(s) (%s): %s", attempt, kind, cause
                    )
                    raise CompletionError(
                        f"Failed to generate model response: {cause}",
                        kind=kind,
                        attempts=attempt,
                    ) from cause

    async def _attempt(
        self,
        attempt: int,
        messages: list[Message],
        tools: Sequence[ToolSpec] | None,
    ) -> CompletionState:
        try:
            completion = await self._provider.generate(messages, tools)
        except Exception as e:
            error = e
        else:
            return Succeeded(completion)

        kind = self._classifier.classify(error) or ErrorKind.OTHER

        if kind is ErrorKind.CONTENT_SAFETY_REJECTION:
            return Fallback(attempt, error)
        if kind is ErrorKind.RATE_LIMITED and self._policy.can_retry(attempt):
            delay_ms = self._policy.delay_ms(attempt)
            record_completion_attempt(self.model_name, "retry")
            logger.warning(
                "Rate limited on attempt %d/%d, retrying in %dms: %s",
                attempt,
                self._policy.max_attempts,
                delay_ms,
                error,
            )
            await self._sleep(delay_ms / 1000)
            return Attempting(attempt + 1)
        return Fatal(attempt, kind, error)

    @staticmethod
    def _publish_completion(completion: Completion, context: ExecutionContext) -> None:
        if completion.text:
            context.publish(StepEvent.thought(completion.text))
        for call in completion.tool_calls:
            context.publish(StepEvent.action(call.name, call.arguments))
