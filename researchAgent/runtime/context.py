"""Request-scoped "current agent" lookup for tool handlers.

An actor binds itself here while it processes a request; tools read it back
instead of having agent state threaded through every call. The binding lives
in a ContextVar, so each asyncio task sees only the agent that started it.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Iterator, Optional

from researchAgent.utils.error_handler import AgentContextError

if TYPE_CHECKING:
    from researchAgent.runtime.actors import Actor

_CURRENT_AGENT: ContextVar[Optional["Actor"]] = ContextVar("research_current_agent", default=None)


@contextmanager
def agent_context(agent: "Actor") -> Iterator["Actor"]:
    """Bind ``agent`` as the current agent for the enclosed block."""
    token = _CURRENT_AGENT.set(agent)
    try:
        yield agent
    finally:
        _CURRENT_AGENT.reset(token)


def get_current_agent(kind: Optional[str] = None) -> "Actor":
    """Return the agent handling the current request.

    Args:
        kind: When given, the bound agent must be of this actor kind

    Raises:
        AgentContextError: No agent is bound, or it has a different kind
    """
    agent = _CURRENT_AGENT.get()
    if agent is None:
        raise AgentContextError(
            "No agent is bound to the current request",
            user_message="This tool can only run inside an agent turn.",
        )
    if kind is not None and agent.kind != kind:
        raise AgentContextError(
            f"Tool requires a {kind} agent, current agent is {agent.identity}",
            user_message=f"This tool is only available to {kind} agents.",
        )
    return agent
