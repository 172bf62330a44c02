"""ReAct Agent HTTP endpoints.

This module provides REST API endpoints for solving a task with the ReAct
agent, either synchronously or as a Server-Sent Events stream of its steps.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse

from react_gateway.agents.react.agent import ReActAgentBuilder
from react_gateway.platform.agent.events import EventPublisher
from react_gateway.platform.agent.protocol import Agent
from react_gateway.platform.agent.streaming import StreamingGateway
from react_gateway.platform.server.dependencies.agents import get_agent, get_gateway

logger = logging.getLogger(__name__)

react_router = APIRouter(
    prefix=f"/{ReActAgentBuilder.SLUG}",
    tags=["agents"],
)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable proxy buffering
    "Access-Control-Allow-Origin": "*",  # CORS support
}

MISSING_TASK_ERROR = "Missing required query parameter: task"


def _missing_task() -> JSONResponse:
    return JSONResponse({"error": MISSING_TASK_ERROR}, status_code=400)


@react_router.get("/solve")
async def solve_handler(
    task: str | None = Query(None, max_length=10000, description="The user's task"),
    agent: Agent = Depends(get_agent(ReActAgentBuilder)),
):
    """Solve a task synchronously.

    Args:
        task: The user's task
        agent: Cached agent instance (injected)

    Returns:
        ``{"result": answer}``; 400 when the task is missing, 500 with
        ``{"error": ...}`` when the task fails
    """
    if not task or not task.strip():
        return _missing_task()

    with EventPublisher().scoped() as context:
        try:
            result = await agent.solve(task, context)
        except Exception as e:
            logger.exception("Solve failed for task %s", context.task_id)
            return JSONResponse({"error": f"Processing error: {e}"}, status_code=500)

    return {"result": result}


@react_router.get("/solve-stream")
async def solve_stream_handler(
    task: str | None = Query(None, max_length=10000, description="The user's task"),
    gateway: StreamingGateway = Depends(get_gateway(ReActAgentBuilder)),
):
    """Solve a task with Server-Sent Events streaming.

    Streams one event per thought, action and observation, and ends with a
    single ``final_answer`` or ``error`` event.

    Args:
        task: The user's task
        gateway: Streaming gateway wrapping the cached agent (injected)

    Returns:
        StreamingResponse with ``text/event-stream`` content
    """
    if not task or not task.strip():
        return _missing_task()

    async def stream_generator():
        async for message in gateway.stream(task):
            yield message.encode()

    return StreamingResponse(
        stream_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
