"""Flat key-value bucket abstraction backing every document store.

The bucket has no directory concept: keys are opaque strings and listing is a
prefix scan. Any object store (S3, R2, GCS, a database table) can sit behind
the protocol; InMemoryBucket is the process-local implementation.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class StoredObject:
    """One value held by a bucket."""

    key: str
    data: bytes
    metadata: Dict[str, str] = field(default_factory=dict)

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)


@runtime_checkable
class KeyValueBucket(Protocol):
    """Minimal async interface the document store needs from object storage."""

    async def get(self, key: str) -> Optional[StoredObject]:
        ...

    async def put(self, key: str, data: bytes, metadata: Optional[Dict[str, str]] = None) -> None:
        ...

    async def list(self, prefix: str = "") -> List[str]:
        ...

    async def delete(self, key: str) -> None:
        ...


class InMemoryBucket:
    """Dictionary-backed bucket shared by all agents of one process.

    Single-key operations are atomic; that is the only guarantee a real
    object store gives as well.
    """

    def __init__(self):
        self._objects: Dict[str, StoredObject] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[StoredObject]:
        return self._objects.get(key)

    async def put(self, key: str, data: bytes, metadata: Optional[Dict[str, str]] = None) -> None:
        async with self._lock:
            self._objects[key] = StoredObject(key=key, data=bytes(data), metadata=dict(metadata or {}))

    async def list(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self._objects if key.startswith(prefix))

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._objects.pop(key, None)

    def keys(self) -> List[str]:
        """All keys, sorted (inspection helper)."""
        return sorted(self._objects)

    def __len__(self) -> int:
        return len(self._objects)
