"""HTTP server infrastructure module.

This module provides the FastAPI application factory and HTTP-related utilities:
- Application factory and lifespan (agent and streaming gateway wiring)
- Platform and agent route handlers
- FastAPI dependencies
- Health checks and service metadata
"""

from react_gateway.platform.server.app import create_app
from react_gateway.platform.server.health import HealthCheck

__all__ = [
    "create_app",
    "HealthCheck",
]
