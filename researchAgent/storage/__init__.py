"""Sandboxed document storage."""

from .bucket import InMemoryBucket, KeyValueBucket, StoredObject
from .document_store import DocumentStore
from .paths import join_key, normalize_path, normalize_prefix

__all__ = [
    "KeyValueBucket",
    "InMemoryBucket",
    "StoredObject",
    "DocumentStore",
    "normalize_path",
    "normalize_prefix",
    "join_key",
]
