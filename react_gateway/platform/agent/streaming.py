"""Streaming gateway: runs one task and relays its step events as SSE messages."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from time import monotonic
from typing import Any

import structlog

from react_gateway.platform.agent.events import EventPublisher, ExecutionContext
from react_gateway.platform.agent.messages import StepEvent
from react_gateway.platform.agent.metrics import record_stream, streams_in_flight
from react_gateway.platform.agent.protocol import Agent

logger = logging.getLogger(__name__)

DEFAULT_STREAM_TIMEOUT_SECONDS = 300.0
ERROR_EVENT = "error"


@dataclass(frozen=True)
class ServerSentEvent:
    """One Server-Sent Events message.

    Attributes:
        event: SSE event name (the step kind, or "error")
        data: JSON payload
    """

    event: str
    data: dict[str, Any]

    @property
    def is_error(self) -> bool:
        return self.event == ERROR_EVENT

    @classmethod
    def from_step(cls, step: StepEvent) -> "ServerSentEvent":
        return cls(event=step.kind.value, data=step.to_dict())

    @classmethod
    def error(cls, message: str) -> "ServerSentEvent":
        return cls(event=ERROR_EVENT, data={"error": f"Processing error: {message}"})

    def encode(self) -> str:
        """Frame the message for a text/event-stream body."""
        return f"event: {self.event}\ndata: {json.dumps(self.data, ensure_ascii=False)}\n\n"


class StreamingGateway:
    """Executes a task in the background and streams its step events.

    Every stream ends with exactly one terminal message: ``final_answer`` on
    success, ``error`` on failure, timeout or cancellation. The task's execution context is
    cleared on every exit path, including consumer disconnects.
    """

    def __init__(
        self,
        agent: Agent,
        publisher: EventPublisher | None = None,
        timeout_seconds: float = DEFAULT_STREAM_TIMEOUT_SECONDS,
    ):
        """Initialize the gateway.

        Args:
            agent: Reasoning loop to run for each task
            publisher: Factory for per-task execution contexts
            timeout_seconds: Upper bound on a stream's lifetime
        """
        self._agent = agent
        self._publisher = publisher or EventPublisher()
        self._timeout_seconds = timeout_seconds

    async def stream(self, task: str) -> AsyncIterator[ServerSentEvent]:
        """Run ``task`` and yield its events as they are published.

        Args:
            task: The user's task

        Yields:
            ServerSentEvent messages, ending with final_answer or error
        """
        queue: asyncio.Queue[ServerSentEvent | None] = asyncio.Queue()
        context = self._publisher.open()
        context.register(lambda step: queue.put_nowait(ServerSentEvent.from_step(step)))

        runner = asyncio.create_task(
            self._run(task, context, queue), name=f"react-task-{context.task_id}"
        )
        try:
            while (message := await queue.get()) is not None:
                logger.debug("Sending event: type=%s", message.event)
                yield message
        finally:
            if not runner.done():
                logger.info("Stream for task %s closed early, cancelling", context.task_id)
                runner.cancel()
            context.clear()

    async def _run(
        self,
        task: str,
        context: ExecutionContext,
        queue: asyncio.Queue[ServerSentEvent | None],
    ) -> None:
        start_time = monotonic()
        deadline = asyncio.timeout(self._timeout_seconds)
        outcome = "cancelled"
        streams_in_flight.inc()
        try:
            with structlog.contextvars.bound_contextvars(task_id=context.task_id):
                logger.info("Starting streaming task: %s", task)
                async with deadline:
                    answer = await self._agent.solve(task, context)
                context.publish(StepEvent.final_answer(answer))
                outcome = "final_answer"
                logger.info(
                    "Streaming task completed in %.0fms (answer length: %d)",
                    (monotonic() - start_time) * 1000,
                    len(answer),
                )
        except Exception as e:
            if isinstance(e, TimeoutError) and deadline.expired():
                outcome = "timeout"
                message = f"task timed out after {self._timeout_seconds:g} seconds"
            else:
                outcome = "error"
                message = str(e) or type(e).__name__
            logger.exception("Streaming task %s failed: %s", context.task_id, message)
            queue.put_nowait(ServerSentEvent.error(message))
        except asyncio.CancelledError:
            logger.warning("Streaming task %s cancelled", context.task_id)
            queue.put_nowait(ServerSentEvent.error("task cancelled"))
            raise
        finally:
            streams_in_flight.dec()
            record_stream(monotonic() - start_time, outcome)
            context.clear()
            queue.put_nowait(None)
