"""Context path helpers.

A context is a dotted string locating a node in the document being loaded,
validated, or described: ``"$"`` is the document root, ``"$.owner.name"`` a
nested record field and ``"$.items.3"`` the fourth element of a collection.
"""
from __future__ import annotations

#: Marks an absolute path (and names the document root).
ROOT_PREFIX = "$"

#: Separates path segments.
SEPARATOR = "."

#: Context used when callers do not pass one.
DEFAULT_ROOT_CONTEXT = ROOT_PREFIX


def join(context: str, segment: str | int) -> str:
    """Append one segment to ``context``."""
    return f"{context}{SEPARATOR}{segment}"


def parent(context: str) -> str:
    """Return ``context`` with its last segment chopped off.

    The root has no parent and is returned unchanged.
    """
    head, sep, _ = context.rpartition(SEPARATOR)
    return head if sep else context


def is_absolute(key_path: str) -> bool:
    return key_path.startswith(ROOT_PREFIX)


def split(path: str) -> list[str]:
    return path.split(SEPARATOR) if path else []
