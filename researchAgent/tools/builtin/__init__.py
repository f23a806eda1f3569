"""Built-in tools of the orchestrator and specialist agents."""

from .agent_management import create_agent, list_agents, message_to_research_agent
from .file_ops import list_files, read_file, write_file
from .relay import message_to_interaction_agent

ORCHESTRATOR_TOOLS = [create_agent, list_agents, message_to_research_agent]
SPECIALIST_TOOLS = [write_file, read_file, list_files, message_to_interaction_agent]

__all__ = [
    "ORCHESTRATOR_TOOLS",
    "SPECIALIST_TOOLS",
    "create_agent",
    "list_agents",
    "message_to_research_agent",
    "write_file",
    "read_file",
    "list_files",
    "message_to_interaction_agent",
]
