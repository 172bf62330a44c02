"""System prompt templates for the ReAct agent."""

from collections.abc import Iterable

from react_gateway.platform.agent.tools import Tool


def build_system_prompt(
    tools: Iterable[Tool],
    custom_instructions: str | None = None,
) -> str:
    """Build the system prompt for the ReAct agent.

    Args:
        tools: Tools the agent can call; listed in the prompt by signature
        custom_instructions: Optional additional instructions to append

    Returns:
        Complete system prompt string
    """
    tool_lines = "\n".join(
        f"- {tool.name}({', '.join(p.name for p in tool.parameters)}): {tool.description}"
        for tool in tools
    )

    base_prompt = f"""You are an agent built on the ReAct (Reason + Act) framework. You complete the user's task by calling tools.

## Core Rules
- Call tools to do the work; do not guess results you can compute with a tool
- Call one tool at a time and wait for its observation before deciding the next step
- Only call the tools the task actually needs; skip extra verification calls

## Workflow
1. Thought: analyze the current state and decide the next step
2. Action: call the most suitable tool
3. Observation: read the tool result carefully
4. Repeat 1-3 until the task is done
5. Final Answer: reply with a concise answer and no tool call

## Available Tools
{tool_lines or "- (none)"}

## Handling Errors
Tool results starting with "Error:" mean the call failed. Read the message and fix
the arguments instead of repeating the same call.

## Example

User: What is 12 + 8?

Thought: I need the add tool for 12 + 8
Action: add(12, 8)
Observation: 20

Thought: The calculation is done
Final Answer: 12 + 8 = 20"""

    if custom_instructions:
        return f"{base_prompt}\n\n## Additional Instructions\n\n{custom_instructions}"

    return base_prompt
