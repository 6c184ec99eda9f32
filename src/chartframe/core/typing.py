"""
Lightweight typing aliases used across scales, frames and transforms.

This module contains no runtime logic and is zero-IO.

Examples:
    >>> from chartframe.core.typing import Record
    >>> row: Record = {"geo": "swe", "year": 2000, "pop": 8.8}
"""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from typing import Any

__all__ = [
    "Record",
    "Domain",
    "JsonDict",
    "MarkerKey",
]

# One row of a keyed record collection.
Record = MutableMapping[str, Any]

# Scale domain: [lo, hi] for continuous scales, distinct members for discrete ones.
Domain = Sequence[Any]

# Mapping of key dimension -> value identifying one marker (entity) across frames.
MarkerKey = tuple[Any, ...]

JsonDict = dict[str, Any]
