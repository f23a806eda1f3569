"""Lexical path normalization for sandboxed document keys.

Nothing here touches a filesystem: ``.`` and ``..`` are resolved purely on
the string, and ``..`` at the top level is dropped instead of climbing out.
"""

from __future__ import annotations

from typing import List


def normalize_path(path: str) -> str:
    """Normalize a relative POSIX-style path.

    Examples:
        >>> normalize_path("/notes/./a/../b.md")
        'notes/b.md'
        >>> normalize_path("../other/x.md")
        'other/x.md'
        >>> normalize_path("a/..")
        ''
    """
    stack: List[str] = []
    for segment in (path or "").lstrip("/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if stack:
                stack.pop()
            continue
        stack.append(segment)
    return "/".join(stack)


def normalize_prefix(prefix: str) -> str:
    """Force a root prefix to end with exactly one slash."""
    return prefix.rstrip("/") + "/"


def join_key(root_prefix: str, relative_path: str) -> str:
    """Storage key for a normalized relative path under a root prefix."""
    return f"{normalize_prefix(root_prefix)}{relative_path}"
