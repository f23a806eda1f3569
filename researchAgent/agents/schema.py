"""Registry entry schema for specialist agents."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict


def utc_now() -> str:
    """Logical timestamp used for registry bookkeeping."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """One specialist known to the orchestrator.

    Attributes:
        id: Sanitized, unique identifier (also the specialist's actor name)
        name: Display name as supplied when the agent was created
        description: The specialist's research domain
        created_at: When the specialist was first registered
        last_active: Last successful creation or synchronous query
    """

    id: str
    name: str
    description: str
    created_at: str
    last_active: str

    def touched(self, when: str) -> "RegistryEntry":
        return replace(self, last_active=when)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistryEntry":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            description=data.get("description", ""),
            created_at=data["created_at"],
            last_active=data.get("last_active", data["created_at"]),
        )
