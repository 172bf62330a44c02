"""Base HTTP endpoints for health checks, metrics, service info and config.

This module provides infrastructure endpoints that are typically used
by load balancers, monitoring systems, and service discovery.
"""

import logging
from enum import Enum

from fastapi import APIRouter, Depends, Response

from react_gateway.platform.observability.metrics import metrics as prom_metrics
from react_gateway.platform.server.dependencies.settings import get_settings
from react_gateway.platform.server.health import HealthCheck, metadata
from react_gateway.platform.settings import Settings

logger = logging.getLogger(__name__)

base_router = APIRouter()
base_tags: list[Enum | str] = ["base"]


@base_router.get("/health", tags=base_tags)
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint for load balancers and orchestrators.

    Returns:
        200 OK with status and provider if healthy, 404 if unhealthy
    """
    if is_healthy():
        return {"status": "OK", "provider": settings.llm.provider}
    else:
        return Response(status_code=404)


def is_healthy() -> bool:
    if not HealthCheck.status():
        logger.info("health-check: fail. disabled")
        return False

    return True


@base_router.get("/info", tags=base_tags)
async def info():
    return metadata.info()


@base_router.get("/metrics", tags=base_tags)
async def metrics():
    body, media_type = prom_metrics()
    return Response(body, media_type=media_type)


@base_router.get("/config", tags=base_tags)
async def config(settings: Settings = Depends(get_settings)):
    """Expose the active model provider settings (never credentials)."""
    return {
        "provider": settings.llm.provider,
        "modelName": settings.llm.model_name,
        "maxMessages": settings.agent.max_messages,
    }
