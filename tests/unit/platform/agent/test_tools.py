"""Unit tests for the tool contract and registry."""

import pytest

from react_gateway.platform.agent.tools import (
    ParameterType,
    Tool,
    ToolParameter,
    ToolRegistrationError,
    ToolRegistry,
)


def echo_tool(name: str = "echo") -> Tool:
    return Tool(
        name=name,
        description="Repeat text",
        parameters=(
            ToolParameter("text", ParameterType.STRING, "Text to repeat"),
            ToolParameter("times", ParameterType.INTEGER, "Repetitions"),
            ToolParameter("shout", ParameterType.BOOLEAN, "Uppercase", required=False),
        ),
        func=lambda text, times, shout: (text.upper() if shout else text) * times,
    )


def broken_tool() -> Tool:
    def fail() -> str:
        raise OSError("disk on fire")

    return Tool("broken", "Always fails", (), fail)


class TestTool:
    """Tests for Tool schema rendering and argument binding."""

    def test_to_openai_spec(self):
        spec = echo_tool().to_openai_spec()

        assert spec == {
            "type": "function",
            "function": {
                "name": "echo",
                "description": "Repeat text",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "text": {"type": "string", "description": "Text to repeat"},
                        "times": {"type": "integer", "description": "Repetitions"},
                        "shout": {"type": "boolean", "description": "Uppercase"},
                    },
                    "required": ["text", "times"],
                },
            },
        }

    def test_bind_orders_arguments(self):
        assert echo_tool().bind_arguments({"times": 2, "text": "a", "shout": True}) == ["a", 2, True]

    def test_bind_optional_missing(self):
        assert echo_tool().bind_arguments({"text": "a", "times": 1}) == ["a", 1, None]

    def test_bind_rejects_bool_for_integer(self):
        with pytest.raises(ValueError, match="must be of type integer"):
            echo_tool().bind_arguments({"text": "a", "times": True})

    def test_bind_rejects_missing_required(self):
        with pytest.raises(ValueError, match="missing required argument 'times'"):
            echo_tool().bind_arguments({"text": "a"})


class TestToolRegistry:
    """Tests for ToolRegistry registration and execution."""

    def test_register_and_lookup(self):
        registry = ToolRegistry([echo_tool()])

        assert "echo" in registry
        assert len(registry) == 1
        assert registry.names == ["echo"]

    def test_duplicate_name_rejected(self):
        registry = ToolRegistry([echo_tool()])

        with pytest.raises(ToolRegistrationError, match="echo"):
            registry.register(echo_tool())

    def test_specs(self):
        registry = ToolRegistry([echo_tool("a"), echo_tool("b")])

        assert [s["function"]["name"] for s in registry.specs()] == ["a", "b"]

    def test_execute(self):
        registry = ToolRegistry([echo_tool()])

        assert registry.execute("echo", '{"text": "ab", "times": 2, "shout": true}') == "ABAB"

    def test_execute_empty_arguments(self):
        registry = ToolRegistry([broken_tool()])

        assert registry.execute("broken", "").startswith("Error:")

    @pytest.mark.parametrize(
        "name, arguments, fragment",
        [
            ("missing", "{}", "unknown tool 'missing'"),
            ("echo", "{not json", "invalid arguments for 'echo'"),
            ("echo", "[1, 2]", "arguments must be a JSON object"),
            ("echo", '{"text": "a", "times": "2"}', "must be of type integer"),
            ("echo", '{"text": "a"}', "missing required argument 'times'"),
        ],
    )
    def test_execute_reports_errors_as_strings(self, name, arguments, fragment):
        """Bad calls never raise; they return an Error: string."""
        result = ToolRegistry([echo_tool()]).execute(name, arguments)

        assert result.startswith("Error:")
        assert fragment in result

    def test_execute_tool_exception(self):
        result = ToolRegistry([broken_tool()]).execute("broken", "{}")

        assert result == "Error: tool 'broken' failed: disk on fire"
