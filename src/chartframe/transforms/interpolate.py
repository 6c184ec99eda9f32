"""
Gap interpolation over ordered records.

A gap is a run of consecutive rows whose value for a field is null, bounded on the left
by the last non-null row. When the next non-null row arrives, every gap row gets the
linear blend of the two bounding values at ``i / (gap_size + 1)`` and is tagged with
provenance. Leading nulls (no left boundary) and trailing nulls (no right boundary)
stay null.

Two renditions:
- interpolate_records: record-level, in place, with per-field provenance under
  INTERPOLATED_KEY as ``{field: (start_index, end_index)}``.
- interpolate_frame: Polars expression rendition used by the frame pipeline, scoped per
  entity with ``over(by)``.

Examples:
    >>> rows = [{"v": 1}, {"v": None}, {"v": None}, {"v": 4}]
    >>> [r["v"] for r in interpolate_records(rows, ["v"])]
    [1, 2.0, 3.0, 4]
"""

from __future__ import annotations

from collections.abc import Iterable, MutableSequence, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import polars as pl

from chartframe.core.typing import Record
from chartframe.data.values import is_number

__all__ = [
    "INTERPOLATED_KEY",
    "MARK_SUFFIX",
    "Gap",
    "interpolate_value",
    "interpolate_gap",
    "evaluate_gap",
    "interpolate_records",
    "interpolate_frame",
]

INTERPOLATED_KEY = "__interpolated__"
MARK_SUFFIX = "__interpolated"


@dataclass
class Gap:
    """Pending gap: index of the left boundary row and indices of null rows since."""

    start: int | None = None
    rows: list[int] = field(default_factory=list)


def interpolate_value(start: Any, end: Any, mu: float) -> Any:
    """
    Blend two boundary values at ``mu`` in [0, 1].

    Numbers and datetimes blend linearly; anything else takes the nearer boundary.
    """
    if is_number(start) and is_number(end):
        return start + (end - start) * mu
    if isinstance(start, (datetime, date)) and type(start) is type(end):
        return start + (end - start) * mu
    return start if mu < 0.5 else end


def interpolate_gap(
    records: Sequence[Record], gap_rows: Sequence[int], start: int, end: int, field: str
) -> None:
    start_val = records[start][field]
    end_val = records[end][field]
    delta = 1 / (len(gap_rows) + 1)
    mu = 0.0
    for idx in gap_rows:
        mu += delta
        row = records[idx]
        row[field] = interpolate_value(start_val, end_val, mu)
        row.setdefault(INTERPOLATED_KEY, {})[field] = (start, end)


def evaluate_gap(records: Sequence[Record], idx: int, field: str, gap: Gap) -> None:
    """Feed row ``idx`` into the pending gap for ``field``, filling the gap if it closes."""
    if records[idx].get(field) is None:
        if gap.start is not None:
            gap.rows.append(idx)
        return
    if gap.rows:
        interpolate_gap(records, gap.rows, gap.start, idx, field)  # type: ignore[arg-type]
        gap.rows.clear()
    gap.start = idx


def _record_fields(records: Iterable[Record]) -> list[str]:
    seen: dict[str, None] = {}
    for row in records:
        for key in row:
            if key != INTERPOLATED_KEY:
                seen.setdefault(key, None)
    return list(seen)


def interpolate_records(
    records: MutableSequence[Record], fields: Iterable[str] | None = None
) -> MutableSequence[Record]:
    """
    Fill inner gaps of each field in place; one independent pass per field.

    Args:
        records: Rows in their natural order (e.g. sorted by frame value).
        fields: Fields to fill; defaults to every field present in any row.

    Returns:
        The same sequence, for chaining.
    """
    for f in list(fields) if fields is not None else _record_fields(records):
        gap = Gap()
        for idx in range(len(records)):
            evaluate_gap(records, idx, f, gap)
    return records


def interpolate_frame(
    df: pl.DataFrame,
    fields: Sequence[str] | None = None,
    *,
    by: Sequence[str] = (),
    mark: bool = False,
) -> pl.DataFrame:
    """
    Fill inner null gaps of numeric fields linearly, per ``by`` group, in row order.

    Args:
        df (pl.DataFrame): Rows already ordered along the interpolation axis.
        fields (Sequence[str] | None): Columns to fill; defaults to numeric columns not in ``by``.
        by (Sequence[str]): Entity key; interpolation never crosses between groups.
        mark (bool): Add a boolean ``<field>__interpolated`` column flagging filled cells.

    Returns:
        pl.DataFrame: Frame with filled columns (integer columns become floats).
    """
    keys = list(by)
    if fields is None:
        fields = [c for c, dt in df.schema.items() if dt.is_numeric() and c not in keys]
    exprs: list[pl.Expr] = []
    for f in fields:
        filled = pl.col(f).interpolate()
        if keys:
            filled = filled.over(keys)
        exprs.append(filled.alias(f))
        if mark:
            exprs.append((pl.col(f).is_null() & filled.is_not_null()).alias(f + MARK_SUFFIX))
    if not exprs:
        return df
    return df.with_columns(exprs)
