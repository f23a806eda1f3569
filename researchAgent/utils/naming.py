"""Identifier sanitization for specialist agents."""

from __future__ import annotations

import re

DEFAULT_AGENT_ID = "agent"

_INVALID_CHARS = re.compile(r"[^a-z0-9_]+")
_UNDERSCORE_RUNS = re.compile(r"_+")


def sanitize_agent_id(name: str) -> str:
    """Turn a free-form agent name into a registry id.

    Lowercases, replaces every run of characters outside ``[a-z0-9_]`` with a
    single underscore, strips leading/trailing underscores and falls back to
    ``"agent"`` when nothing is left. The result is a fixed point:
    ``sanitize_agent_id(sanitize_agent_id(x)) == sanitize_agent_id(x)``.

    Examples:
        >>> sanitize_agent_id("DMD Research! v2")
        'dmd_research_v2'
        >>> sanitize_agent_id("!!!")
        'agent'
    """
    lowered = (name or "").strip().lower()
    collapsed = _UNDERSCORE_RUNS.sub("_", _INVALID_CHARS.sub("_", lowered))
    return collapsed.strip("_") or DEFAULT_AGENT_ID
