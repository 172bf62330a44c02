"""Unit tests for the retrying completion client."""

import asyncio

import pytest

from react_gateway.platform.agent.completion import (
    CONTENT_SAFETY_FALLBACK_TEXT,
    RetryingCompletionClient,
)
from react_gateway.platform.agent.config import RetryPolicy
from react_gateway.platform.agent.errors import CompletionError, ErrorKind
from react_gateway.platform.agent.messages import (
    AssistantMessage,
    StepKind,
    SystemMessage,
    ToolCall,
    UserMessage,
)
from react_gateway.platform.agent.repair import CONTINUE_PROMPT

MESSAGES = [SystemMessage("sys"), UserMessage("What is 2 + 3?")]


def rate_limited() -> Exception:
    return RuntimeError("Throttling: Request rate increased too quickly")


def content_rejected() -> Exception:
    return RuntimeError("DataInspectionFailed: Input data may contain inappropriate content.")


class TestSuccess:
    """Tests for completions that succeed on the first attempt."""

    async def test_returns_provider_completion(self, make_provider, completions, sleeper, context):
        completion = completions.text("5")
        client = RetryingCompletionClient(make_provider([completion]), sleep=sleeper)

        assert await client.complete(MESSAGES, context) is completion
        assert sleeper.delays == []

    async def test_publishes_thought_then_actions(
        self, make_provider, completions, sleeper, context, recorded_events
    ):
        """Text becomes one thought; each tool call becomes one action, in order."""
        calls = (
            ToolCall("c1", "add", '{"a": 2, "b": 3}'),
            ToolCall("c2", "multiply", '{"a": 5, "b": 2}'),
        )
        client = RetryingCompletionClient(
            make_provider([completions.tools(*calls, text="Let me compute")]), sleep=sleeper
        )

        await client.complete(MESSAGES, context)

        assert [e.kind for e in recorded_events] == [StepKind.THOUGHT, StepKind.ACTION, StepKind.ACTION]
        assert recorded_events[0].content == "Let me compute"
        assert [(e.tool_name, e.tool_input) for e in recorded_events[1:]] == [
            ("add", '{"a": 2, "b": 3}'),
            ("multiply", '{"a": 5, "b": 2}'),
        ]

    async def test_no_thought_without_text(
        self, make_provider, completions, sleeper, context, recorded_events
    ):
        call = ToolCall("c1", "add", "{}")
        client = RetryingCompletionClient(make_provider([completions.tools(call)]), sleep=sleeper)

        await client.complete(MESSAGES, context)

        assert [e.kind for e in recorded_events] == [StepKind.ACTION]

    async def test_sends_repaired_messages(self, make_provider, completions, sleeper, context):
        """The provider always receives a repaired sequence."""
        provider = make_provider([completions.text("ok")])
        client = RetryingCompletionClient(provider, sleep=sleeper)

        await client.complete([SystemMessage("x"), AssistantMessage(None, ())], context)

        assert provider.calls == [[SystemMessage("x"), UserMessage(CONTINUE_PROMPT)]]


class TestRateLimiting:
    """Tests for the bounded exponential backoff."""

    async def test_retries_then_succeeds(
        self, make_provider, completions, sleeper, context, recorded_events
    ):
        """Two rate limits then success: sleeps 2s and 4s, one set of events."""
        provider = make_provider([rate_limited(), rate_limited(), completions.text("5")])
        client = RetryingCompletionClient(provider, sleep=sleeper)

        completion = await client.complete(MESSAGES, context)

        assert completion.text == "5"
        assert sleeper.delays == [2.0, 4.0]
        assert len(provider.calls) == 3
        assert [e.kind for e in recorded_events] == [StepKind.THOUGHT]

    async def test_exhausted_raises(self, make_provider, sleeper, context, recorded_events):
        """Three rate limits: two sleeps, then a RATE_LIMITED CompletionError."""
        provider = make_provider([rate_limited(), rate_limited(), rate_limited()])
        client = RetryingCompletionClient(provider, sleep=sleeper)

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(MESSAGES, context)

        assert exc_info.value.kind is ErrorKind.RATE_LIMITED
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert sleeper.delays == [2.0, 4.0]
        assert recorded_events == []

    async def test_custom_policy(self, make_provider, completions, sleeper, context):
        policy = RetryPolicy(max_attempts=4, base_delay_ms=100, backoff_multiplier=3)
        provider = make_provider([rate_limited(), rate_limited(), rate_limited(), completions.text("ok")])
        client = RetryingCompletionClient(provider, policy=policy, sleep=sleeper)

        await client.complete(MESSAGES, context)

        assert sleeper.delays == [0.1, 0.3, 0.9]

    async def test_single_attempt_policy_never_sleeps(self, make_provider, sleeper, context):
        client = RetryingCompletionClient(
            make_provider([rate_limited()]), policy=RetryPolicy(max_attempts=1), sleep=sleeper
        )

        with pytest.raises(CompletionError):
            await client.complete(MESSAGES, context)

        assert sleeper.delays == []

    async def test_cancelled_during_backoff(self, make_provider, completions, context):
        """Cancellation while waiting propagates and stops further attempts."""
        provider = make_provider([rate_limited(), completions.text("never")])
        client = RetryingCompletionClient(provider)  # real asyncio.sleep, 2s

        task = asyncio.create_task(client.complete(MESSAGES, context))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(provider.calls) == 1


class TestContentSafety:
    """Tests for the content-safety fallback."""

    async def test_returns_fallback(self, make_provider, sleeper, context, recorded_events):
        """A rejection yields the fallback text, one thought, and no sleep."""
        provider = make_provider([content_rejected()])
        client = RetryingCompletionClient(provider, sleep=sleeper)

        completion = await client.complete(MESSAGES, context)

        assert completion.is_fallback
        assert completion.text == CONTENT_SAFETY_FALLBACK_TEXT
        assert completion.tool_calls == ()
        assert sleeper.delays == []
        assert len(provider.calls) == 1
        assert [(e.kind, e.content) for e in recorded_events] == [
            (StepKind.THOUGHT, CONTENT_SAFETY_FALLBACK_TEXT)
        ]

    async def test_rejection_after_rate_limit(self, make_provider, sleeper, context):
        """A rejection on a later attempt still falls back."""
        provider = make_provider([rate_limited(), content_rejected()])
        client = RetryingCompletionClient(provider, sleep=sleeper)

        completion = await client.complete(MESSAGES, context)

        assert completion.is_fallback
        assert sleeper.delays == [2.0]

    async def test_custom_fallback_text(self, make_provider, sleeper, context):
        client = RetryingCompletionClient(
            make_provider([content_rejected()]), sleep=sleeper, fallback_text="Cannot help with that."
        )

        assert (await client.complete(MESSAGES, context)).text == "Cannot help with that."


class TestOtherFailures:
    """Tests for non-retryable failures."""

    async def test_raises_immediately(self, make_provider, sleeper, context, recorded_events):
        provider = make_provider([ValueError("invalid api key")])
        client = RetryingCompletionClient(provider, sleep=sleeper)

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(MESSAGES, context)

        assert exc_info.value.kind is ErrorKind.OTHER
        assert exc_info.value.attempts == 1
        assert "invalid api key" in str(exc_info.value)
        assert sleeper.delays == []
        assert len(provider.calls) == 1
        assert recorded_events == []

    async def test_custom_classifier(self, make_provider, sleeper, context):
        """An injected classifier decides the failure kind."""

        class AlwaysRateLimited:
            def classify(self, error):
                return ErrorKind.RATE_LIMITED

        provider = make_provider([ValueError("odd"), ValueError("odd"), ValueError("odd")])
        client = RetryingCompletionClient(provider, classifier=AlwaysRateLimited(), sleep=sleeper)

        with pytest.raises(CompletionError):
            await client.complete(MESSAGES, context)

        assert sleeper.delays == [2.0, 4.0]

    async def test_classifier_without_opinion_means_other(self, make_provider, sleeper, context):
        class NoOpinion:
            def classify(self, error):
                return None

        client = RetryingCompletionClient(
            make_provider([RuntimeError("429")]), classifier=NoOpinion(), sleep=sleeper
        )

        with pytest.raises(CompletionError) as exc_info:
            await client.complete(MESSAGES, context)

        assert exc_info.value.kind is ErrorKind.OTHER
