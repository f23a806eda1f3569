"""Graph components shared by research agents."""

from .builder import build_agent_graph
from .message_utils import (
    APPROVAL_NO,
    APPROVAL_YES,
    DENIED_MESSAGE,
    ConfirmationContext,
    ToolExecution,
    clean_message_history,
    message_text,
    reconcile_confirmations,
)
from .state import AgentState

__all__ = [
    "AgentState",
    "build_agent_graph",
    "clean_message_history",
    "reconcile_confirmations",
    "ConfirmationContext",
    "ToolExecution",
    "APPROVAL_YES",
    "APPROVAL_NO",
    "DENIED_MESSAGE",
    "message_text",
]
