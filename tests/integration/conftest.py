"""Integration test fixtures.

This module provides shared fixtures for integration tests including:
- Route/handler tests with stubbed agents (shallow app setup)
- Full application tests through create_app with a scripted provider
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from react_gateway.agents.react.agent import ReActAgentBuilder
from react_gateway.agents.react.routes import react_router
from react_gateway.platform.agent.config import AgentConfig, AgentIdentity, LlmConfig, RetryPolicy
from react_gateway.platform.agent.events import ExecutionContext
from react_gateway.platform.agent.messages import StepEvent
from react_gateway.platform.agent.streaming import StreamingGateway
from react_gateway.platform.server.app import create_app
from react_gateway.platform.server.health import HealthCheck
from react_gateway.platform.server.routes import root as root_router
from react_gateway.platform.settings import Settings

# =============================================================================
# Agent Fixtures
# =============================================================================


@pytest.fixture
def stub_agent_identity() -> AgentIdentity:
    """Create a stub agent identity with canned test data."""
    return AgentIdentity(
        name="Test Agent",
        slug="test-agent",
        description="A test agent for integration tests",
    )


class StubAgent:
    """Agent with a canned reasoning trace and answer.

    This is a stub (not a mock) because it primarily provides predetermined
    return values rather than verifying interactions.
    """

    def __init__(self, identity: AgentIdentity, answer: str = "12 + 8 = 20", error: Exception | None = None):
        self.identity = identity
        self.name = identity.name
        self.slug = identity.slug
        self.answer = answer
        self.error = error
        self.tasks: list[str] = []

    async def solve(self, task: str, context: ExecutionContext) -> str:
        self.tasks.append(task)
        context.publish(StepEvent.thought("I need the add tool"))
        context.publish(StepEvent.action("add", '{"a": 12, "b": 8}'))
        context.publish(StepEvent.observation("20"))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def stub_agent(stub_agent_identity: AgentIdentity) -> StubAgent:
    return StubAgent(stub_agent_identity)


@pytest.fixture
def failing_agent(stub_agent_identity: AgentIdentity) -> StubAgent:
    return StubAgent(stub_agent_identity, error=RuntimeError("provider unavailable"))


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings with local defaults, independent of the environment."""
    for var in ("LLM__PROVIDER", "LLM__MODEL", "AGENT__MAX_MESSAGES", "BUGSNAG__RELEASE_STAGE"):
        monkeypatch.delenv(var, raising=False)
    return Settings()


# =============================================================================
# FastAPI App Fixtures (Shallow - no middleware, minimal lifespan)
# =============================================================================


def build_test_app(agent: StubAgent, settings: Settings) -> FastAPI:
    """Create a minimal test FastAPI app.

    This is intentionally SHALLOW - no middleware, no lifespan.
    Tests route handlers and their interaction with dependencies.
    """
    app = FastAPI()

    # Register the stub agent and its gateway directly in app.state
    app.state.settings = settings
    app.state.agents = {ReActAgentBuilder: agent}
    app.state.gateways = {ReActAgentBuilder: StreamingGateway(agent, timeout_seconds=5)}

    app.include_router(root_router)
    app.include_router(react_router)

    return app


@pytest.fixture
def test_app(stub_agent: StubAgent, settings: Settings) -> FastAPI:
    return build_test_app(stub_agent, settings)


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    """Create a test client for the test app.

    No context manager needed since we're not using lifespan.
    """
    return TestClient(test_app)


@pytest.fixture
def failing_client(failing_agent: StubAgent, settings: Settings) -> TestClient:
    return TestClient(build_test_app(failing_agent, settings))


@pytest.fixture
def client_with_health_enabled(test_app: FastAPI) -> Generator[TestClient]:
    """Create a test client with health checks enabled."""
    HealthCheck.enable()
    yield TestClient(test_app)
    HealthCheck.disable()


@pytest.fixture
def client_with_health_disabled(test_app: FastAPI) -> Generator[TestClient]:
    """Create a test client with health checks disabled."""
    HealthCheck.disable()
    yield TestClient(test_app)


# =============================================================================
# Full Application Fixtures (create_app + lifespan, scripted provider)
# =============================================================================


@pytest.fixture
def full_client_factory(settings: Settings, make_provider):
    """Build a TestClient over the real app whose agent talks to a scripted provider.

    The returned client must be used as a context manager so the lifespan runs.
    """

    def _factory(script) -> TestClient:
        provider = make_provider(script)
        builder = ReActAgentBuilder(
            agent_config=AgentConfig(max_iterations=5),
            llm_config=LlmConfig(model=provider.model_name),
            # Rate limiting is not exercised over HTTP; keep attempts to one.
            retry_policy=RetryPolicy(max_attempts=1),
            identity=AgentIdentity(name="ReAct Agent", description="test", slug=ReActAgentBuilder.SLUG),
            provider=provider,
        )
        return TestClient(create_app(settings, builder=builder))

    return _factory
