"""Tool registration per agent kind."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from langchain_core.tools import BaseTool

from researchAgent.graph.message_utils import ToolExecution

LOGGER = logging.getLogger(__name__)

ORCHESTRATOR = "orchestrator"
SPECIALIST = "specialist"


@dataclass(frozen=True, slots=True)
class ToolMeta:
    """Describes which agent kind owns a tool."""

    name: str
    owner: str
    deferred: bool = False  # executed only after a human approves it


class ToolRegistry:
    """Tracks the tool set of each agent kind.

    Tool sets never overlap: a name belongs to exactly one owner. Tools
    registered as deferred have no inline handler; their execution runs during
    confirmation reconciliation once the human answers "yes".
    """

    def __init__(self) -> None:
        self._tools: Dict[str, BaseTool] = {}
        self._meta: Dict[str, ToolMeta] = {}
        self._deferred: Dict[str, ToolExecution] = {}

    def register_tool(self, tool: BaseTool, owner: str) -> None:
        self._claim(tool.name, owner, deferred=False)
        self._tools[tool.name] = tool
        LOGGER.debug(f"Registered {owner} tool: {tool.name}")

    def register_tools(self, tools: Iterable[BaseTool], owner: str) -> None:
        for tool in tools:
            self.register_tool(tool, owner)

    def register_deferred(self, name: str, owner: str, execution: ToolExecution) -> None:
        """Register a tool that needs human confirmation before it runs."""
        self._claim(name, owner, deferred=True)
        self._deferred[name] = execution
        LOGGER.info(f"Registered deferred {owner} tool: {name}")

    def _claim(self, name: str, owner: str, deferred: bool) -> None:
        existing = self._meta.get(name)
        if existing is not None:
            raise ValueError(f"Tool '{name}' already registered for {existing.owner}")
        self._meta[name] = ToolMeta(name=name, owner=owner, deferred=deferred)

    def tools_for(self, owner: str) -> List[BaseTool]:
        """Inline tools of one agent kind, in registration order."""
        return [self._tools[meta.name] for meta in self._meta.values() if meta.owner == owner and not meta.deferred]

    def executions_for(self, owner: str) -> Dict[str, ToolExecution]:
        """Deferred executions of one agent kind (used for reconciliation)."""
        return {
            name: execution
            for name, execution in self._deferred.items()
            if self._meta[name].owner == owner
        }
