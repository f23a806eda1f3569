"""State definition shared by orchestrator and specialist graphs."""

from __future__ import annotations

from typing import Annotated, List, TypedDict

from langchain_core.messages import BaseMessage
from langgraph.graph import add_messages


class AgentState(TypedDict, total=False):
    """Conversation state for one agent turn.

    The system prompt is not part of the state; the agent node prepends it on
    every model call so it never ends up in persisted history.
    """

    messages: Annotated[List[BaseMessage], add_messages]
    loops: int  # agent steps taken in this turn
