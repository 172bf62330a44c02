"""Per-task step event publishing.

An ``ExecutionContext`` is created when a task starts and passed explicitly to
every layer that may publish step events. Each context owns its own subscriber
list, so concurrent tasks never observe each other's events and no locking is
needed.
"""

import logging
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from react_gateway.platform.agent.messages import StepEvent

logger = logging.getLogger(__name__)

type Subscriber = Callable[[StepEvent], None]


class ExecutionContext:
    """Isolation unit for one task invocation's subscribers.

    Subscribers are invoked synchronously, in registration order, on the
    publishing path. A failing subscriber is logged and skipped; it never
    prevents later subscribers from running and never reaches the publisher.
    """

    def __init__(self, task_id: str | None = None) -> None:
        self.task_id = task_id or str(uuid.uuid4())
        self._subscribers: list[Subscriber] = []

    def __repr__(self) -> str:
        return f"ExecutionContext(task_id={self.task_id!r}, subscribers={len(self._subscribers)})"

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def register(self, subscriber: Subscriber) -> None:
        """Add a subscriber to this context."""
        self._subscribers.append(subscriber)

    def publish(self, event: StepEvent) -> None:
        """Deliver an event to every subscriber of this context."""
        for subscriber in tuple(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.warning(
                    "Step event subscriber failed for task %s (event=%s)",
                    self.task_id,
                    event.kind,
                    exc_info=True,
                )

    def clear(self) -> None:
        """Release all subscribers. Safe to call repeatedly."""
        self._subscribers.clear()


class EventPublisher:
    """Factory for execution contexts.

    Example:
        with publisher.scoped() as context:
            context.register(print)
            await agent.solve(task, context)
    """

    def open(self, task_id: str | None = None) -> ExecutionContext:
        """Create a new context. The caller must ``clear()`` it when the task ends."""
        return ExecutionContext(task_id)

    @contextmanager
    def scoped(self, task_id: str | None = None) -> Iterator[ExecutionContext]:
        """Open a context that is cleared on every exit path.

        The task id is bound to the structured logging context for the duration.
        """
        context = self.open(task_id)
        try:
            with structlog.contextvars.bound_contextvars(task_id=context.task_id):
                yield context
        finally:
            context.clear()
