"""Prometheus metrics collection and HTTP middleware.

This module provides Prometheus metrics integration including the HTTP request
duration histogram, the shared bucket layout, and the /metrics payload.
"""

from time import monotonic
from typing import NamedTuple

import prometheus_client
from starlette.routing import Match


class HTTPLabels(NamedTuple):
    method: str
    path: str
    http_status: str


_NXX_LUT = ["1XX", "2XX", "3XX", "4XX", "5XX"]


def http_status_nxx(status: int) -> str:
    """A coarser 2XX, 4XX, 5XX"""
    return _NXX_LUT[status // 100 - 1]


BUCKETS = (
    # log spaced, 3 per decade; model calls and streams need the long tail
    0.001,  # 1 ms
    0.002,
    0.005,
    0.01,
    0.02,
    0.05,
    0.1,
    0.2,
    0.5,
    1,
    2,
    5,
    10,
    20,
    50,
    100,
    300,  # stream timeout
    float("inf"),
)


def get_path(routes, scope) -> str:
    """Extract the matched route path template from a request scope.

    Args:
        routes: List of FastAPI/Starlette route objects
        scope: ASGI request scope dictionary

    Returns:
        The matched route path template, or "path-not-found" if no match
    """
    for route in routes:
        match, _ = route.matches(scope)
        if match is Match.FULL:
            return route.path
    return "path-not-found"


async def prometheus_middleware(request, call_next):
    """HTTP middleware that records request duration metrics.

    For streaming responses the duration covers the time to the response
    headers, not the whole stream.

    Args:
        request: The incoming HTTP request
        call_next: The next middleware/handler in the chain

    Returns:
        The HTTP response from the downstream handler
    """
    start_time = monotonic()
    response = await call_next(request)
    elapsed_sec = monotonic() - start_time

    labels = HTTPLabels(
        method=request.method,
        path=get_path(request.app.routes, request.scope),
        http_status=http_status_nxx(response.status_code),
    )
    http_histogram.labels(*labels).observe(elapsed_sec)

    return response


http_histogram = prometheus_client.Histogram(
    name="http_request_duration_seconds",
    documentation="Request duration (seconds)",
    labelnames=HTTPLabels._fields,
    buckets=BUCKETS,
)


def metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics output for the /metrics endpoint.

    Returns:
        Tuple of (metrics_body, content_type) for the HTTP response
    """
    return (
        prometheus_client.generate_latest(prometheus_client.REGISTRY),
        prometheus_client.CONTENT_TYPE_LATEST,
    )
