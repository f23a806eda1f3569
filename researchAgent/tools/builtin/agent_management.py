"""Delegation tools of the orchestrator: create, list and query specialists.

Failures (duplicate id, unknown id, a specialist that cannot be initialized or
reached) come back to the model as ``{"ok": false, "error": ...}`` results so
it can explain them to the human.
"""

import json
import logging
from typing import Annotated

from langchain_core.tools import tool

from researchAgent.runtime.context import get_current_agent
from researchAgent.utils.error_handler import safe_tool_call

LOGGER = logging.getLogger(__name__)

__all__ = ["create_agent", "list_agents", "message_to_research_agent"]


@tool
@safe_tool_call("create_agent")
async def create_agent(
    name: Annotated[str, "Agent name (e.g., duchenne_md_research)"],
    description: Annotated[str, "What this agent researches"],
    message: Annotated[str, "Initial research task"],
) -> str:
    """Create a new research agent for a specific domain.

    The name is turned into an id (lowercase, underscores). Creating an id
    that already exists fails; use message_to_research_agent to reuse it.
    """
    orchestrator = get_current_agent("orchestrator")
    agent_id = await orchestrator.create_specialist(name, description, message)
    return json.dumps({"ok": True, "agent_id": agent_id}, ensure_ascii=False)


@tool
@safe_tool_call("list_agents")
async def list_agents() -> str:
    """List all known research agents (id, name, description), sorted by name."""
    orchestrator = get_current_agent("orchestrator")
    agents = [
        {"id": entry.id, "name": entry.name, "description": entry.description}
        for entry in orchestrator.registry.list_entries()
    ]
    return json.dumps({"ok": True, "agents": agents}, ensure_ascii=False)


@tool
@safe_tool_call("message_to_research_agent")
async def message_to_research_agent(
    agent_id: Annotated[str, "The ID of the agent (as returned by create_agent or list_agents)"],
    message: Annotated[str, "Message to send"],
) -> str:
    """Send a message to an existing research agent and return its reply."""
    orchestrator = get_current_agent("orchestrator")
    response = await orchestrator.message_specialist(agent_id, message)
    return json.dumps({"ok": True, "response": response}, ensure_ascii=False)
