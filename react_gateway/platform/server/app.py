"""FastAPI application factory and server configuration.

This module creates and configures the FastAPI application with all middleware,
routes, and lifecycle management.
"""

import asyncio
import logging
import os
import signal
from contextlib import asynccontextmanager

from fastapi import FastAPI

from react_gateway.agents.react.agent import ReActAgentBuilder
from react_gateway.agents.react.routes import react_router
from react_gateway.platform.agent.streaming import StreamingGateway
from react_gateway.platform.observability import errors as bugsnag
from react_gateway.platform.observability.logging import configure_logging
from react_gateway.platform.observability.metrics import prometheus_middleware
from react_gateway.platform.server.health import HealthCheck, metadata
from react_gateway.platform.server.middlewares import CorrelationIdMiddleware
from react_gateway.platform.server.routes import root as root_router
from react_gateway.platform.settings import Settings

logger = logging.getLogger(__name__)


def lifespan_closure(settings: Settings, builder: ReActAgentBuilder | None = None):
    @asynccontextmanager
    async def lifespan(app):
        """
        Use this to initialize all of the singleton dependencies and shared
        objects.  i.e. agents, gateways, reporters, bugsnag, etc
        """
        if settings.bugsnag.release_stage in ["production", "development"]:
            signal_handler = SignalHandler(app)
            signal_handler.register_signal_handler()
        bugsnag.initialize_bugsnag(
            settings.bugsnag.api_key,
            settings.bugsnag.release_stage,
        )

        # Configure structured logging (JSON in prod/dev, console in local)
        if settings.app_http.log_json is not None:
            json_output = settings.app_http.log_json
        else:
            json_output = settings.bugsnag.release_stage != "local"
        configure_logging(settings.app_http.log_level, json_output=json_output)

        app.state.settings = settings

        agent_builder = builder or ReActAgentBuilder.default_builder(
            llm_config=settings.llm.to_config(),
            retry_policy=settings.retry.to_policy(),
            agent_config=settings.agent.to_config(),
        )
        agent = agent_builder.build()
        app.state.agents = {ReActAgentBuilder: agent}
        app.state.gateways = {
            ReActAgentBuilder: StreamingGateway(agent, timeout_seconds=settings.stream.timeout_seconds)
        }
        metadata.update(llm_provider=settings.llm.provider, llm_model=settings.llm.model_name)
        logger.info(
            "Agent %s ready (provider=%s, model=%s)",
            agent.slug,
            settings.llm.provider,
            settings.llm.model_name,
        )

        HealthCheck.enable()
        yield
        HealthCheck.disable()

    return lifespan


def create_app(settings: Settings, builder: ReActAgentBuilder | None = None):
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings instance
        builder: Optional agent builder; defaults to one built from settings

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(lifespan=lifespan_closure(settings, builder))
    app.add_middleware(CorrelationIdMiddleware)
    app.middleware("http")(prometheus_middleware)

    # Include platform routes (health, info, metrics, config)
    app.include_router(root_router)

    # Include agent routes
    app.include_router(react_router)

    return app


class SignalHandler:
    def __init__(self, app: FastAPI):
        self.app = app

    async def handle_exit(self):
        """
        Handle the exit of the server
        Do NOT use FastAPI @app.on_event("shutdown") or lifespan
        The problem with this method is, it is invoked *after* server
        stops accepting request, so it does not give us any time to
        drain requests in progress and DNS cache to refresh
        """
        HealthCheck.disable()
        for _ in range(20):
            logger.info("Shutting down...")
            await asyncio.sleep(1)

        os.kill(os.getpid(), signal.SIGUSR1)

    def signal_handler(self):
        asyncio.create_task(self.handle_exit())

    def register_signal_handler(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in [signal.SIGINT, signal.SIGTERM]:
            loop.add_signal_handler(sig, self.signal_handler)
