"""Agent dependencies for FastAPI routes."""

from collections.abc import Callable

from fastapi import Request

from react_gateway.platform.agent.protocol import Agent
from react_gateway.platform.agent.streaming import StreamingGateway


def _lookup(registry: dict[type, object], builder_cls: type, kind: str):
    if builder_cls not in registry:
        raise KeyError(
            f"{kind} for {builder_cls.__name__} not found. "
            f"Available: {[cls.__name__ for cls in registry.keys()]}"
        )
    return registry[builder_cls]


def get_agent(builder_cls: type) -> Callable[[Request], Agent]:
    """Create a dependency that retrieves a cached agent by its builder class.

    Args:
        builder_cls: The agent builder class (e.g., ReActAgentBuilder)

    Returns:
        A FastAPI dependency function that returns the cached agent

    Raises:
        KeyError: If the agent is not found in the registry

    Example:
        from react_gateway.agents.react.agent import ReActAgentBuilder

        @router.get("/solve")
        async def solve(agent: Agent = Depends(get_agent(ReActAgentBuilder))):
            ...
    """

    def _get_agent(request: Request) -> Agent:
        return _lookup(request.app.state.agents, builder_cls, "Agent")

    return _get_agent


def get_gateway(builder_cls: type) -> Callable[[Request], StreamingGateway]:
    """Create a dependency that retrieves the streaming gateway wrapping an agent.

    Raises:
        KeyError: If no gateway was created for the builder class
    """

    def _get_gateway(request: Request) -> StreamingGateway:
        return _lookup(request.app.state.gateways, builder_cls, "Streaming gateway")

    return _get_gateway
