"""Bridge between the cycle engine and the external chat assistant.

Modules:
    tools    — Tool declarations, typed action requests and their execution
    context  — System prompt and transcript seeding
    session  — Anthropic Messages API conversation with tool calls
"""

from src.assistant.context import build_system_context, to_assistant_history
from src.assistant.session import AssistantSession
from src.assistant.tools import (
    TOOLS,
    ActionResult,
    LogSymptom,
    UpdatePeriodDate,
    dispatch_tool_call,
    execute_action,
    parse_action,
)

__all__ = [
    "TOOLS",
    "ActionResult",
    "AssistantSession",
    "LogSymptom",
    "UpdatePeriodDate",
    "build_system_context",
    "dispatch_tool_call",
    "execute_action",
    "parse_action",
    "to_assistant_history",
]
