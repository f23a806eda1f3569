"""Status updates from a specialist back to the interaction (orchestrator) agent."""

import json
from typing import Annotated

from langchain_core.tools import tool

from researchAgent.runtime.context import get_current_agent
from researchAgent.utils.error_handler import safe_tool_call

__all__ = ["message_to_interaction_agent"]


@tool
@safe_tool_call("message_to_interaction_agent")
async def message_to_interaction_agent(
    message: Annotated[str, "Status or summary to report back"],
) -> str:
    """Send a status update back to the Interaction Agent.

    Delivery is asynchronous: the update shows up in the Interaction Agent's
    conversation before its next reply to the human. Nothing is returned.
    """
    agent = get_current_agent("specialist")
    agent.notify_orchestrator(message)
    return json.dumps({"ok": True})
