"""react-gateway - A ReAct agent service with a resilient, retrying model gateway and SSE streaming."""

from .platform.server.app import create_app
from .platform.settings import Settings


def app():
    """Create the FastAPI application instance."""
    settings = Settings()
    return create_app(settings)
