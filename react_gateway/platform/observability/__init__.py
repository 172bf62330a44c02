"""Observability infrastructure module.

This module provides monitoring and error tracking:
- Structured logging with correlation and task IDs
- Prometheus metrics
- Bugsnag error reporting
"""

from react_gateway.platform.observability.errors import initialize_bugsnag
from react_gateway.platform.observability.logging import (
    configure_logging,
    correlation_id_ctx,
    get_logger,
)
from react_gateway.platform.observability.metrics import (
    BUCKETS,
    metrics,
    prometheus_middleware,
)

__all__ = [
    "BUCKETS",
    "configure_logging",
    "correlation_id_ctx",
    "get_logger",
    "initialize_bugsnag",
    "metrics",
    "prometheus_middleware",
]
