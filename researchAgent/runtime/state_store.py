"""Durable per-identity state storage for actors.

State is a JSON-compatible dict; actors convert messages before saving.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple

from researchAgent.utils.naming import sanitize_agent_id

LOGGER = logging.getLogger(__name__)


class StateStore(Protocol):
    async def load(self, kind: str, name: str) -> Optional[Dict[str, Any]]:
        ...

    async def save(self, kind: str, name: str, state: Dict[str, Any]) -> None:
        ...


class InMemoryStateStore:
    """Process-local state store (state is lost on exit)."""

    def __init__(self):
        self._states: Dict[Tuple[str, str], Dict[str, Any]] = {}

    async def load(self, kind: str, name: str) -> Optional[Dict[str, Any]]:
        state = self._states.get((kind, name))
        return copy.deepcopy(state) if state is not None else None

    async def save(self, kind: str, name: str, state: Dict[str, Any]) -> None:
        self._states[(kind, name)] = copy.deepcopy(state)


class JsonFileStateStore:
    """One JSON file per actor identity.

    Directory structure:
        <root>/
        ├── orchestrator/
        │   └── default.json
        └── specialist/
            └── dmd_research.json
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        LOGGER.info(f"JsonFileStateStore initialized: {self.root}")

    def _path(self, kind: str, name: str) -> Path:
        return self.root / sanitize_agent_id(kind) / f"{sanitize_agent_id(name)}.json"

    async def load(self, kind: str, name: str) -> Optional[Dict[str, Any]]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, self._path(kind, name))

    async def save(self, kind: str, name: str, state: Dict[str, Any]) -> None:
        # Snapshot on the loop; the executor only writes text
        payload = json.dumps(state, ensure_ascii=False, indent=2)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._write, self._path(kind, name), payload)

    @staticmethod
    def _read(path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(path)
