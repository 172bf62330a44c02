"""Message sequence repair.

Providers such as DashScope (Qwen) reject conversations whose first non-system
message is not from the user, or whose last message is not a user or tool
message. ``repair_sequence`` normalizes any message list into that shape
without ever failing.
"""

import logging
from collections.abc import Sequence
from typing import assert_never

from react_gateway.platform.agent.messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolResultMessage,
    UserMessage,
)

logger = logging.getLogger(__name__)

CONTINUE_PROMPT = "continue task"


def _is_void(message: Message) -> bool:
    match message:
        case UserMessage() | AssistantMessage():
            return message.is_void
        case SystemMessage() | ToolResultMessage():
            return False
        case _:
            assert_never(message)


def _is_valid_tail(message: Message) -> bool:
    match message:
        case UserMessage() | ToolResultMessage():
            return True
        case SystemMessage() | AssistantMessage():
            return False
        case _:
            assert_never(message)


def repair_sequence(messages: Sequence[Message]) -> list[Message]:
    """Return a provider-valid copy of ``messages``.

    1. Void user/assistant messages are dropped.
    2. A synthetic user message is inserted before the first non-system
       message unless it is already a user message (appended if there is none).
    3. A synthetic user message is appended unless the sequence ends with a
       user or tool result message. An assistant message carrying tool calls
       counts as an assistant tail too, so the result always ends on a user
       or tool result message.

    Applying it to an already valid sequence returns an equal list.

    Args:
        messages: Conversation in provider order

    Returns:
        New list satisfying the provider ordering rules
    """
    fixed = [message for message in messages if not _is_void(message)]

    first_turn = next(
        (i for i, message in enumerate(fixed) if not isinstance(message, SystemMessage)),
        None,
    )
    if first_turn is None:
        fixed.append(UserMessage(CONTINUE_PROMPT))
    elif not isinstance(fixed[first_turn], UserMessage):
        fixed.insert(first_turn, UserMessage(CONTINUE_PROMPT))

    # Re-checked after the insertion above.
    if not _is_valid_tail(fixed[-1]):
        fixed.append(UserMessage(CONTINUE_PROMPT))

    if len(fixed) != len(messages):
        logger.debug("Repaired message sequence: %d -> %d messages", len(messages), len(fixed))
    return fixed
