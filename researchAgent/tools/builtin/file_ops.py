"""Workspace document tools for specialist agents.

Every path is relative to the calling specialist's own workspace; the
document store normalizes it and keeps it inside that workspace.
"""

import json
import logging
from typing import Annotated, Optional

from langchain_core.tools import tool

from researchAgent.runtime.context import get_current_agent
from researchAgent.storage.paths import normalize_path
from researchAgent.utils.error_handler import safe_tool_call, tool_error

LOGGER = logging.getLogger(__name__)

__all__ = ["write_file", "read_file", "list_files"]


@tool
@safe_tool_call("write_file")
async def write_file(
    path: Annotated[str, "Relative path within your workspace, e.g. notes/trials.md"],
    content: Annotated[str, "Full text content; replaces any previous content"],
) -> str:
    """Write content to a file in your workspace.

    Creates the file or fully replaces it. Folders need no creation step:
    writing "notes/trials.md" makes "notes/" appear in list_files.

    Examples:
        write_file("findings/summary.md", "# Summary\\n...")
    """
    agent = get_current_agent("specialist")
    await agent.documents.write(path, content)
    return json.dumps({"ok": True, "path": normalize_path(path)}, ensure_ascii=False)


@tool
@safe_tool_call("read_file")
async def read_file(
    path: Annotated[str, "Relative path within your workspace"],
) -> str:
    """Read a file from your workspace.

    Returns the full text, or an error when nothing was written at that path.
    """
    agent = get_current_agent("specialist")
    content = await agent.documents.read(path)
    if content is None:
        return tool_error(f"File not found: {normalize_path(path)}")
    return json.dumps({"ok": True, "path": normalize_path(path), "content": content}, ensure_ascii=False)


@tool
@safe_tool_call("list_files")
async def list_files(
    dir: Annotated[Optional[str], "Optional folder within your workspace; omit for everything"] = None,
) -> str:
    """List files in your workspace (recursively), sorted by path."""
    agent = get_current_agent("specialist")
    files = await agent.documents.list(dir)
    LOGGER.info(f"Listed {len(files)} file(s) for {agent.identity}")
    return json.dumps({"ok": True, "files": files}, ensure_ascii=False)
