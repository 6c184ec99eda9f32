"""
Fingerprint-keyed cache for lazily derived values.

Each derived property is stored with the fingerprint of the inputs it was computed
from. Reading with a different fingerprint recomputes and replaces the entry; reading
with the same fingerprint returns the cached value. There is no ambient dependency
tracking: callers pass the fingerprint of exactly the inputs they read.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

__all__ = ["DerivedCache"]

T = TypeVar("T")


class DerivedCache:
    """Registry of derived values keyed by name, each tagged with its input fingerprint."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, Any]] = {}

    def get(self, name: str, fp: str, compute: Callable[[], T]) -> T:
        entry = self._entries.get(name)
        if entry is not None and entry[0] == fp:
            return entry[1]  # type: ignore[no-any-return]
        value = compute()
        self._entries[name] = (fp, value)
        return value

    def invalidate(self, name: str | None = None) -> None:
        """Drop one entry (or all entries when name is None)."""
        if name is None:
            self._entries.clear()
        else:
            self._entries.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
