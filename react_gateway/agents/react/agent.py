"""ReAct agent and its builder.

The agent alternates model turns and tool executions until the model answers
without requesting a tool, the provider rejects the content, or the iteration
limit is reached.
"""

import logging
from typing import Self

from react_gateway.agents.react.prompt import build_system_prompt
from react_gateway.agents.react.tools.math import create_math_tools
from react_gateway.platform.agent.completion import RetryingCompletionClient
from react_gateway.platform.agent.config import (
    AgentConfig,
    AgentIdentity,
    LlmConfig,
    RetryPolicy,
)
from react_gateway.platform.agent.events import ExecutionContext
from react_gateway.platform.agent.llm_client import CompletionProvider, LlmClient
from react_gateway.platform.agent.messages import (
    Message,
    StepEvent,
    SystemMessage,
    ToolResultMessage,
    UserMessage,
)
from react_gateway.platform.agent.tools import Tool, ToolRegistry
from react_gateway.platform.constants import SERVICE_NAME

logger = logging.getLogger(__name__)

DEFAULT_FINAL_ANSWER = "Task completed."


def max_iterations_answer(max_iterations: int) -> str:
    return f"Reached the maximum number of iterations ({max_iterations}); the task may be incomplete."


class ReActAgent:
    """Reason + act loop over a retrying completion client and a tool registry."""

    def __init__(
        self,
        completion_client: RetryingCompletionClient,
        tools: ToolRegistry,
        config: AgentConfig,
        identity: AgentIdentity,
        system_prompt: str,
    ) -> None:
        self._client = completion_client
        self._tools = tools
        self._config = config
        self._identity = identity
        self._system_prompt = system_prompt

    @property
    def identity(self) -> AgentIdentity:
        return self._identity

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def slug(self) -> str:
        return self._identity.slug

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    @property
    def model_name(self) -> str:
        return self._client.model_name

    async def solve(self, task: str, context: ExecutionContext) -> str:
        """Run the reasoning loop for a task.

        Thought and action events are published by the completion client;
        this loop publishes one observation per executed tool call.

        Args:
            task: The user's task
            context: Execution context receiving the step events

        Returns:
            The final answer text

        Raises:
            CompletionError: If the model call fails and cannot be recovered
        """
        messages: list[Message] = [SystemMessage(self._system_prompt), UserMessage(task)]
        specs = self._tools.specs() or None

        for iteration in range(1, self._config.max_iterations + 1):
            logger.debug("ReAct iteration %d/%d", iteration, self._config.max_iterations)
            completion = await self._client.complete(messages, context, specs)

            if completion.is_fallback or not completion.tool_calls:
                return completion.text or DEFAULT_FINAL_ANSWER

            messages.append(completion.message)
            for call in completion.tool_calls:
                output = self._tools.execute(call.name, call.arguments)
                logger.info("Tool %s returned: %s", call.name, output)
                context.publish(StepEvent.observation(output))
                messages.append(
                    ToolResultMessage(output, tool_call_id=call.id, tool_name=call.name)
                )
            messages = self._window(messages)

        logger.warning("Task stopped after %d iterations", self._config.max_iterations)
        return max_iterations_answer(self._config.max_iterations)

    def _window(self, messages: list[Message]) -> list[Message]:
        """Trim the history to ``max_messages``, keeping whole tool turns.

        The system message and the task are always kept. The kept tail never
        starts with a tool result: providers accept one only after the
        assistant message requesting it. When the newest turn alone
        overflows the window it is kept whole.
        """
        limit = self._config.max_messages
        if len(messages) <= limit:
            return messages
        head, rest = messages[:2], messages[2:]
        start = max(len(rest) - (limit - 2), 0)
        while start < len(rest) and isinstance(rest[start], ToolResultMessage):
            start += 1
        if start == len(rest):
            start = len(rest) - 1
            while start > 0 and isinstance(rest[start], ToolResultMessage):
                start -= 1
        return [*head, *rest[start:]]


class ReActAgentBuilder:
    """Builder for constructing ReAct agents.

    This builder assembles all components needed for a ReAct agent:
    - LLM client behind the retrying completion client
    - Tool registry with the agent's tools
    - System prompt listing those tools
    """

    SLUG = "react"

    def __init__(
        self,
        agent_config: AgentConfig,
        llm_config: LlmConfig,
        retry_policy: RetryPolicy,
        identity: AgentIdentity,
        tools: list[Tool] | None = None,
        provider: CompletionProvider | None = None,
    ) -> None:
        """Initialize the builder with configuration.

        Args:
            agent_config: Configuration for agent behavior (iterations, window size)
            llm_config: Configuration for the LLM client
            retry_policy: Backoff policy for rate-limited model calls
            identity: Agent identity (name, description, slug)
            tools: Tools to register. Defaults to the arithmetic tools.
            provider: Optional completion provider. Defaults to an LlmClient
                built from ``llm_config``. Inject for testing.
        """
        self.agent_config = agent_config
        self.llm_config = llm_config
        self.retry_policy = retry_policy
        self.identity = identity
        self.tools = tools if tools is not None else create_math_tools()
        self._provider = provider

    def build(self) -> ReActAgent:
        """Build and return a configured ReActAgent.

        Raises:
            ToolRegistrationError: If two tools share a name
        """
        provider = self._provider or LlmClient(self.identity.slug, self.llm_config)
        registry = ToolRegistry(self.tools, agent_slug=self.identity.slug)
        logger.info(
            "Building agent %s: model=%s tools=%s", self.identity.slug, provider.model_name, registry.names
        )
        return ReActAgent(
            completion_client=RetryingCompletionClient(provider, policy=self.retry_policy),
            tools=registry,
            config=self.agent_config,
            identity=self.identity,
            system_prompt=build_system_prompt(self.tools),
        )

    @classmethod
    def default_builder(
        cls,
        llm_config: LlmConfig,
        retry_policy: RetryPolicy | None = None,
        agent_config: AgentConfig | None = None,
        identity: AgentIdentity | None = None,
    ) -> Self:
        """Create a builder with default configuration for a ReAct agent.

        Args:
            llm_config: Model and credentials resolved from settings
            retry_policy: Optional retry policy. Defaults to 3 attempts, 2s/4s backoff.
            agent_config: Optional agent behavior. Defaults to 15 iterations, 10 messages.
            identity: Optional agent identity. Defaults to the ReAct agent.

        Returns:
            A configured ReActAgentBuilder instance.
        """
        default_identity = AgentIdentity(
            name="ReAct Agent",
            description=f"Tool-using reasoning agent served by {SERVICE_NAME}",
            slug=cls.SLUG,
        )
        return cls(
            agent_config=agent_config or AgentConfig(),
            llm_config=llm_config,
            retry_policy=retry_policy or RetryPolicy(),
            identity=identity or default_identity,
        )
