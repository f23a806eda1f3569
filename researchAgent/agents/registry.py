"""Agent Registry - the orchestrator's map from specialist id to metadata.

The registry is a view over the ``registry`` dict inside the orchestrator's
durable state; mutations land in that dict and are persisted together with
the rest of the orchestrator state.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .schema import RegistryEntry

LOGGER = logging.getLogger(__name__)


class AgentRegistry:
    """Specialist registry backed by a plain dict of entry dicts."""

    def __init__(self, entries: Dict[str, Dict[str, Any]]):
        self._entries = entries

    def __contains__(self, agent_id: str) -> bool:
        return agent_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, agent_id: str) -> Optional[RegistryEntry]:
        data = self._entries.get(agent_id)
        return RegistryEntry.from_dict(data) if data is not None else None

    def upsert(self, entry: RegistryEntry) -> None:
        self._entries[entry.id] = entry.to_dict()
        LOGGER.info(f"Registered specialist: {entry.id} ({entry.name})")

    def touch(self, agent_id: str, when: str) -> Optional[RegistryEntry]:
        """Update last_active; unknown ids are ignored."""
        entry = self.get(agent_id)
        if entry is None:
            return None
        updated = entry.touched(when)
        self._entries[agent_id] = updated.to_dict()
        return updated

    def list_entries(self) -> List[RegistryEntry]:
        """All entries sorted by display name (case-insensitive), then id."""
        entries = [RegistryEntry.from_dict(data) for data in self._entries.values()]
        return sorted(entries, key=lambda entry: (entry.name.lower(), entry.id))
