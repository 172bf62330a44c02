"""Prometheus metrics for model calls and tool executions."""

from typing import NamedTuple

import prometheus_client

from react_gateway.platform.observability.metrics import BUCKETS


class ToolMetricsLabels(NamedTuple):
    agent_slug: str
    tool_name: str


completion_attempts = prometheus_client.Counter(
    name="llm_completion_attempts_total",
    documentation="Provider completion attempts by outcome",
    labelnames=("model", "outcome"),
)

agent_tokens = prometheus_client.Counter(
    name="llm_tokens_total",
    documentation="Tokens reported by the provider",
    labelnames=("agent_slug", "model", "direction"),
)

tool_calls = prometheus_client.Counter(
    name="agent_tool_calls_total",
    documentation="Tool executions",
    labelnames=(*ToolMetricsLabels._fields, "error"),
)

tool_duration = prometheus_client.Histogram(
    name="agent_tool_duration_seconds",
    documentation="Tool execution duration (seconds)",
    labelnames=ToolMetricsLabels._fields,
    buckets=BUCKETS,
)


def record_completion_attempt(model: str, outcome: str) -> None:
    """Count one completion attempt.

    Args:
        model: Model identifier
        outcome: One of "success", "fallback", "retry", "fatal"
    """
    completion_attempts.labels(model, outcome).inc()


def record_agent_tokens(agent_slug: str, model: str, input_tokens: int, output_tokens: int) -> None:
    if input_tokens:
        agent_tokens.labels(agent_slug, model, "input").inc(input_tokens)
    if output_tokens:
        agent_tokens.labels(agent_slug, model, "output").inc(output_tokens)


def record_tool_call(labels: ToolMetricsLabels, duration: float, error: bool = False) -> None:
    tool_calls.labels(*labels, str(error).lower()).inc()
    tool_duration.labels(*labels).observe(duration)


streams_in_flight = prometheus_client.Gauge(
    name="agent_streams_in_flight",
    documentation="Streaming tasks currently running",
)

stream_duration = prometheus_client.Histogram(
    name="agent_stream_duration_seconds",
    documentation="Streaming task duration (seconds)",
    labelnames=("outcome",),
    buckets=BUCKETS,
)


def record_stream(duration: float, outcome: str) -> None:
    """Observe a finished streaming task.

    Args:
        duration: Seconds from start to terminal event
        outcome: One of "final_answer", "error", "timeout", "cancelled"
    """
    stream_duration.labels(outcome).observe(duration)
