"""Tool invocation contract and registry.

A tool has a unique name, a description, an ordered list of primitive-typed
parameters, and returns a single string. Failures are reported as strings
starting with ``ERROR_PREFIX``; nothing raises across this boundary.
"""

import json
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from time import monotonic
from typing import Any

from react_gateway.platform.agent.metrics import ToolMetricsLabels, record_tool_call

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error:"


class ParameterType(StrEnum):
    """JSON schema types a tool parameter may take."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"


_PYTHON_TYPES: dict[ParameterType, type] = {
    ParameterType.STRING: str,
    ParameterType.BOOLEAN: bool,
    ParameterType.INTEGER: int,
}


class ToolRegistrationError(ValueError):
    """Raised when a tool cannot be registered (e.g. duplicate name)."""


@dataclass(frozen=True)
class ToolParameter:
    name: str
    type: ParameterType
    description: str = ""
    required: bool = True


@dataclass(frozen=True)
class Tool:
    """A named capability the model may invoke.

    Attributes:
        name: Unique tool name
        description: Human-readable description shown to the model
        parameters: Ordered parameters; values are passed positionally to ``func``
        func: Implementation returning the result text
    """

    name: str
    description: str
    parameters: tuple[ToolParameter, ...]
    func: Callable[..., str]

    def to_openai_spec(self) -> dict[str, Any]:
        """Render the OpenAI function-calling definition of this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        p.name: {"type": p.type.value, "description": p.description}
                        for p in self.parameters
                    },
                    "required": [p.name for p in self.parameters if p.required],
                },
            },
        }

    def bind_arguments(self, arguments: dict[str, Any]) -> list[Any]:
        """Order and type-check decoded arguments against the parameter list.

        Raises:
            ValueError: If a required argument is missing or has the wrong type
        """
        values = []
        for parameter in self.parameters:
            if parameter.name not in arguments:
                if parameter.required:
                    raise ValueError(f"missing required argument '{parameter.name}'")
                values.append(None)
                continue
            value = arguments[parameter.name]
            expected = _PYTHON_TYPES[parameter.type]
            # bool is a subclass of int; reject it for integer parameters.
            if not isinstance(value, expected) or (
                expected is int and isinstance(value, bool)
            ):
                raise ValueError(
                    f"argument '{parameter.name}' must be of type {parameter.type.value}"
                )
            values.append(value)
        return values


class ToolRegistry:
    """Holds the tools available to an agent and executes them by name."""

    def __init__(self, tools: Iterable[Tool] = (), agent_slug: str = "default"):
        self._tools: dict[str, Tool] = {}
        self._agent_slug = agent_slug
        for tool in tools:
            self.register(tool)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ToolRegistrationError(f"Tool name collision: '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def specs(self) -> Sequence[dict[str, Any]]:
        """OpenAI-style definitions of every registered tool."""
        return [tool.to_openai_spec() for tool in self._tools.values()]

    def execute(self, name: str, arguments: str) -> str:
        """Execute a tool call requested by the model.

        Args:
            name: Tool name
            arguments: Serialized JSON arguments from the provider

        Returns:
            The tool output, or a string starting with ``ERROR_PREFIX``
        """
        tool = self._tools.get(name)
        if tool is None:
            return f"{ERROR_PREFIX} unknown tool '{name}'"

        try:
            decoded = json.loads(arguments) if arguments.strip() else {}
            if not isinstance(decoded, dict):
                raise ValueError("arguments must be a JSON object")
            values = tool.bind_arguments(decoded)
        except ValueError as e:
            return f"{ERROR_PREFIX} invalid arguments for '{name}': {e}"

        labels = ToolMetricsLabels(self._agent_slug, name)
        start_time = monotonic()
        try:
            result = tool.func(*values)
        except Exception as e:
            record_tool_call(labels, duration=monotonic() - start_time, error=True)
            logger.warning("Tool '%s' raised: %s", name, e, exc_info=True)
            return f"{ERROR_PREFIX} tool '{name}' failed: {e}"

        record_tool_call(labels, duration=monotonic() - start_time)
        return result
