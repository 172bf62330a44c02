"""Settings dependency for FastAPI routes."""

from fastapi import Request

from react_gateway.platform.settings import Settings


def get_settings(request: Request) -> Settings:
    """Return the settings stored on the app during startup."""
    return request.app.state.settings
