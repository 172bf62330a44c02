"""Middleware for request correlation ID propagation."""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from react_gateway.platform.observability.logging import correlation_id_ctx

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: Request) -> str | None:
    value = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if not value or len(value) > MAX_REQUEST_ID_LENGTH or not value.isprintable():
        return None
    return value


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that extracts or generates correlation IDs for request tracing.

    Uses X-Request-ID from the incoming request when it is a sane value,
    otherwise generates a new UUID. The ID is stored in a context variable for
    the structured logging system and echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = _incoming_request_id(request) or str(uuid.uuid4())
        token = correlation_id_ctx.set(correlation_id)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = correlation_id
            return response
        finally:
            correlation_id_ctx.reset(token)
