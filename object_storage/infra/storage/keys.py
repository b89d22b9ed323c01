"""Key arithmetic for presenting a flat key space as a directory tree.

Listing is a prefix scan followed by a one-segment projection: every key
returned by the remote store is cut down to the name of the immediate child
of the prefix. No tree is built or cached; the remote store stays the only
source of truth.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

SEPARATOR = "/"


def segments(key: str) -> list[str]:
    """Split a key on the separator, dropping empty segments.

    ``"a//b/"`` and ``"a/b"`` both give ``["a", "b"]``.
    """
    return [part for part in key.split(SEPARATOR) if part]


def child_name(key: str, depth: int) -> str | None:
    """Return the segment of ``key`` right below ``depth`` segments.

    Args:
        key: Full object key
        depth: Number of leading segments to drop (the prefix depth)

    Returns:
        The child segment, or None when the key has no segment past ``depth``
        (the key equals the prefix or is shorter than it).
    """
    parts = segments(key)
    if len(parts) <= depth:
        return None
    return parts[depth]


def immediate_children(
    keys: Iterable[str],
    prefix: str | None = None,
    *,
    dedupe: bool = False,
) -> list[str]:
    """Project full keys onto the immediate child names of ``prefix``.

    The remote order is preserved. Without ``dedupe`` a child shared by
    several keys (``a/b/c/1`` and ``a/b/c/2`` under ``a/b``) is reported
    once per key.

    Args:
        keys: Full keys as returned by a prefix scan
        prefix: Prefix the scan was run with (None for the whole bucket)
        dedupe: Keep only the first occurrence of every child name

    Returns:
        Child names relative to ``prefix``
    """
    depth = len(segments(prefix)) if prefix else 0
    names: Iterator[str] = (
        name for name in (child_name(key, depth) for key in keys) if name is not None
    )
    if dedupe:
        return list(dict.fromkeys(names))
    return list(names)
