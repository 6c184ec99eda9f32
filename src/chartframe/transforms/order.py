"""
Deterministic multi-key ordering of keyed record collections.

Order specifications accept the shorthands used in chart configs and normalize them to
OrderKey(field, direction):

- ``"geo"``                      -> ascending on geo
- ``{"pop": "desc"}``            -> descending on pop
- ``("pop", "descending")``      -> descending on pop

Sorting is stable and lexicographic over the keys; ties fall through to the next key
and fully equal records keep their input order. Nulls sort last in both directions.

Examples:
    >>> rows = [{"a": 2, "id": "x"}, {"a": 1, "id": "y"}, {"a": 1, "id": "z"}]
    >>> [r["id"] for r in order_records(rows, ["a"])]
    ['y', 'z', 'x']
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import polars as pl

from chartframe.core.errors import OrderError
from chartframe.core.typing import Record

__all__ = [
    "Direction",
    "OrderKey",
    "OrderSpec",
    "normalize_order",
    "order_records",
    "order_frame",
]


class Direction(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


_DIRECTION_ALIASES: dict[str, Direction] = {
    "asc": Direction.ASCENDING,
    "ascending": Direction.ASCENDING,
    "desc": Direction.DESCENDING,
    "descending": Direction.DESCENDING,
}


@dataclass(frozen=True)
class OrderKey:
    field: str
    direction: Direction = Direction.ASCENDING

    @property
    def descending(self) -> bool:
        return self.direction is Direction.DESCENDING


OrderSpec = str | Mapping[str, str] | tuple[str, str] | OrderKey


def _direction(value: Any) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str) and value.strip().lower() in _DIRECTION_ALIASES:
        return _DIRECTION_ALIASES[value.strip().lower()]
    raise OrderError(f"unknown order direction {value!r}; use 'asc' or 'desc'")


def normalize_order(order_by: Iterable[OrderSpec]) -> list[OrderKey]:
    """Normalize order shorthands into OrderKey instances."""
    keys: list[OrderKey] = []
    for part in order_by:
        if isinstance(part, OrderKey):
            keys.append(part)
        elif isinstance(part, str):
            keys.append(OrderKey(part))
        elif isinstance(part, Mapping):
            if len(part) != 1:
                raise OrderError(f"order mapping must have exactly one field, got {dict(part)!r}")
            ((field, direction),) = part.items()
            keys.append(OrderKey(field, _direction(direction)))
        elif isinstance(part, tuple) and len(part) == 2:
            keys.append(OrderKey(part[0], _direction(part[1])))
        else:
            raise OrderError(f"unsupported order specification {part!r}")
    for key in keys:
        if not key.field:
            raise OrderError("order field must be a non-empty string")
    return keys


def order_records(records: Iterable[Record], order_by: Sequence[OrderSpec]) -> list[Record]:
    """
    Stable multi-key sort of records; returns a new list.

    Implemented as successive stable sorts from the least to the most significant key.
    """
    out = list(records)
    for key in reversed(normalize_order(order_by)):
        if key.descending:
            out.sort(key=lambda r, f=key.field: (r.get(f) is not None, r.get(f)), reverse=True)
        else:
            out.sort(key=lambda r, f=key.field: (r.get(f) is None, r.get(f)))
    return out


def order_frame(df: pl.DataFrame, order_by: Sequence[OrderSpec]) -> pl.DataFrame:
    """Polars rendition of order_records (stable, nulls last)."""
    keys = normalize_order(order_by)
    if not keys:
        return df
    return df.sort(
        [k.field for k in keys],
        descending=[k.descending for k in keys],
        nulls_last=True,
        maintain_order=True,
    )
