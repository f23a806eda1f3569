"""Per-agent sandboxed document store over a shared key-value bucket."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, TypeVar

from researchAgent.storage.bucket import KeyValueBucket
from researchAgent.storage.paths import join_key, normalize_path, normalize_prefix
from researchAgent.utils.error_handler import (
    InvalidPathError,
    StorageError,
    is_transient_error,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


class DocumentStore:
    """Private document namespace of one agent.

    Every key this store reads or writes starts with ``root_prefix``; relative
    paths are normalized lexically and ``..`` cannot climb above the root.
    There are no directories: writing ``a/b/c.md`` is the only way ``a/`` and
    ``a/b/`` come to exist, as prefixes.
    """

    def __init__(
        self,
        bucket: KeyValueBucket,
        root_prefix: str,
        *,
        author: str = "system",
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        retry_max_delay: float = 5.0,
    ):
        """
        Args:
            bucket: Shared backing bucket
            root_prefix: Key prefix owned by this agent (e.g. "memory/research_agents/alice/")
            author: Recorded in the metadata of every write
            max_retries: Retries allowed for transient bucket errors
            retry_base_delay: First backoff delay in seconds
            retry_max_delay: Backoff ceiling in seconds
        """
        self.bucket = bucket
        self.root_prefix = normalize_prefix(root_prefix)
        self.author = author
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay

    def key_for(self, path: str) -> str:
        """Storage key for a document path.

        Raises:
            InvalidPathError: Path is empty or normalizes to the root itself
        """
        safe_path = normalize_path(path)
        if not safe_path:
            raise InvalidPathError(
                f"Invalid path {path!r}: resolves to the workspace root",
                user_message=f"Invalid path: {path!r}. Provide a file path relative to your workspace.",
            )
        return join_key(self.root_prefix, safe_path)

    async def write(self, path: str, content: str) -> None:
        """Create or fully replace the document at ``path``."""
        key = self.key_for(path)
        metadata = {
            "author": self.author,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "content_type": DEFAULT_CONTENT_TYPE,
        }
        await self._with_retries(
            f"put {key}",
            lambda: self.bucket.put(key, content.encode("utf-8"), metadata),
        )
        LOGGER.info(f"Wrote document: {key} ({len(content)} chars)")

    async def read(self, path: str) -> Optional[str]:
        """Return document text, or None if nothing was written at ``path``."""
        key = self.key_for(path)
        stored = await self._with_retries(f"get {key}", lambda: self.bucket.get(key))
        if stored is None:
            LOGGER.debug(f"Document not found: {key}")
            return None
        return stored.text()

    async def list(self, directory: Optional[str] = None) -> List[str]:
        """Relative paths of every document under the root or a sub-directory.

        Args:
            directory: Optional sub-directory, normalized like any path

        Returns:
            Sorted, de-duplicated paths relative to the agent root
        """
        safe_dir = normalize_path(directory) if directory else ""
        prefix = self.root_prefix + (f"{safe_dir}/" if safe_dir else "")
        keys = await self._with_retries(f"list {prefix}", lambda: self.bucket.list(prefix))
        relative = {key[len(self.root_prefix):] for key in keys if key.startswith(prefix)}
        return sorted(relative)

    async def delete(self, path: str) -> None:
        """Remove one document; deleting a missing document is a no-op."""
        key = self.key_for(path)
        await self._with_retries(f"delete {key}", lambda: self.bucket.delete(key))
        LOGGER.info(f"Deleted document: {key}")

    async def _with_retries(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except Exception as e:
                if not is_transient_error(e):
                    raise StorageError(
                        f"Storage {operation} failed: {e}",
                        user_message=f"Storage operation failed: {e}",
                    ) from e
                attempt += 1
                if attempt > self.max_retries:
                    LOGGER.error(f"Storage {operation} failed after {self.max_retries} retries: {e}")
                    raise StorageError(
                        f"Storage {operation} failed after {self.max_retries} retries: {e}",
                        user_message="Storage is temporarily unavailable, please try again later.",
                    ) from e
                delay = min(self.retry_base_delay * 2 ** (attempt - 1), self.retry_max_delay)
                LOGGER.warning(f"Transient storage error on {operation} (attempt {attempt}), retrying in {delay:.2f}s: {e}")
                await asyncio.sleep(delay)
