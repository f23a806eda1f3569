"""Tool collections and registry."""

from .builtin import ORCHESTRATOR_TOOLS, SPECIALIST_TOOLS
from .registry import ORCHESTRATOR, SPECIALIST, ToolRegistry


def build_tool_registry() -> ToolRegistry:
    """Registry holding the orchestrator and specialist tool sets."""
    registry = ToolRegistry()
    registry.register_tools(ORCHESTRATOR_TOOLS, ORCHESTRATOR)
    registry.register_tools(SPECIALIST_TOOLS, SPECIALIST)
    return registry


__all__ = [
    "ToolRegistry",
    "ORCHESTRATOR",
    "SPECIALIST",
    "ORCHESTRATOR_TOOLS",
    "SPECIALIST_TOOLS",
    "build_tool_registry",
]
