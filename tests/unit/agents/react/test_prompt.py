"""Unit tests for the ReAct system prompt builder."""

from react_gateway.agents.react.prompt import build_system_prompt
from react_gateway.agents.react.tools.math import create_math_tools


class TestBuildSystemPrompt:
    """Tests for build_system_prompt function."""

    def test_lists_tool_signatures(self):
        result = build_system_prompt(create_math_tools())

        assert "- add(a, b): Add two integers" in result
        assert "- divide(a, b):" in result

    def test_no_tools(self):
        assert "- (none)" in build_system_prompt([])

    def test_describes_react_workflow(self):
        result = build_system_prompt([])

        for step in ("Thought:", "Action:", "Observation:", "Final Answer:"):
            assert step in result

    def test_custom_instructions_appended(self):
        result = build_system_prompt([], custom_instructions="Answer in French.")

        assert result.endswith("## Additional Instructions\n\nAnswer in French.")

    def test_none_custom_instructions(self):
        assert "Additional Instructions" not in build_system_prompt([], custom_instructions=None)
