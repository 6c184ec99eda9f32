"""
Canonical JSON serialization and fingerprint helpers for derived-value caching.

Provides a single canonical JSON policy and SHA-256 helpers so config snapshots can be
compared cheaply. Derived values (resolved scales, step scales) are cached against a
fingerprint of their inputs and recomputed when it changes.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
        - default=str (dates and enums serialize by their string form)
    - Hashing is performed over the UTF-8 encoded canonical JSON string.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "hash_config",
    "fingerprint",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-like object. Non-JSON scalars fall back to ``str``.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )


def _sha256_hexdigest(s: str) -> str:
    """Compute SHA-256 hex digest of a UTF-8 string."""
    h = hashlib.sha256()
    h.update(s.encode("utf-8"))
    return h.hexdigest()


def hash_config(config: Mapping[str, Any]) -> str:
    """
    Compute a stable hash for a config mapping by hashing its canonical JSON.

    Args:
        config (Mapping[str, Any]): Config mapping (e.g. ``model.model_dump()``).

    Returns:
        str: SHA-256 hex digest over the canonical JSON serialization.

    Notes:
        Re-ordering keys in the mapping does not change the result.
    """
    return _sha256_hexdigest(json_dumps_canonical(dict(config)))


def fingerprint(*parts: Any) -> str:
    """
    Combine heterogeneous inputs (config hashes, data versions) into one fingerprint.

    Examples:
        >>> from chartframe.core.hashing import fingerprint
        >>> fingerprint("abc", 3) == fingerprint("abc", 3)
        True
        >>> fingerprint("abc", 3) == fingerprint("abc", 4)
        False
    """
    return _sha256_hexdigest(json_dumps_canonical(list(parts)))
