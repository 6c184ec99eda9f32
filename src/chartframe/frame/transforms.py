"""
Pure transforms over frame-grouped data.

Each transform takes a FrameGroup (``frame_map`` takes the flat Polars frame) and returns
a new one; nothing here reads engine state, so the functions are safe to call from any
pipeline and to re-run.

Responsibilities
- frame_map: reindex every entity against the full frame index, interpolate gaps per
  entity, and group by frame value (empty frames become placeholders).
- interpolate_group / extrapolate: fill inner gaps, then optionally extend known values
  past each entity's first/last known frame, never beyond the frames that satisfy the
  marker's required fields.
- filter_required / order: per-frame row filtering and ordering.
- current_frame: the exact frame for a value, or a blend of the two neighbouring frames.
- differentiate: per-entity stepwise differences along the frame order.
- marker_limits: first/last frame per marker key.

Notes
- Row order inside a frame follows the input order; joins keep the left side's order.
- Integer measure columns become floats once interpolated or blended.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any

import polars as pl

from chartframe.core.typing import MarkerKey
from chartframe.data.concepts import ConceptDescriptor
from chartframe.data.values import inclusive_range
from chartframe.transforms.interpolate import interpolate_frame
from chartframe.transforms.order import OrderSpec, order_frame

from .group import FRAME_POS, FrameGroup
from .step_scale import StepScale

__all__ = [
    "frame_index",
    "reindex_frames",
    "frame_map",
    "interpolate_group",
    "frame_extent",
    "extrapolate",
    "filter_required",
    "order",
    "interpolate_towards",
    "current_frame",
    "differentiate",
    "marker_limits",
]

_ROW = "__row"
_PREV = "__prev"
_AFTER = "__after"
_POS = "__pos"


def _left_join_ordered(left: pl.DataFrame, right: pl.DataFrame, on: Sequence[str]) -> pl.DataFrame:
    return (
        left.with_row_index(_ROW)
        .join(right, on=list(on), how="left")
        .sort(_ROW)
        .drop(_ROW)
    )


def _value_fields(columns: Iterable[str], frame_field: str, key: Sequence[str]) -> list[str]:
    skip = {frame_field, FRAME_POS, *key}
    return [c for c in columns if c not in skip]


def _numeric_fields(df: pl.DataFrame, frame_field: str, key: Sequence[str]) -> list[str]:
    return [
        c for c in _value_fields(df.columns, frame_field, key) if df.schema[c].is_numeric()
    ]


def frame_index(
    df: pl.DataFrame, frame_field: str, concept: ConceptDescriptor | None = None
) -> list[Any]:
    """
    Full ordered frame index of ``df``: every value from the observed first to last frame.

    Falls back to the observed distinct values when the frame values have no regular
    spacing (floats, labels, irregular dates).
    """
    if frame_field not in df.columns:
        return []
    observed = df.get_column(frame_field).drop_nulls().unique().sort().to_list()
    if not observed:
        return []
    full = inclusive_range(observed[0], observed[-1], concept, observed)
    return full if full is not None else observed


def reindex_frames(
    df: pl.DataFrame, frame_field: str, key: Sequence[str], index: Sequence[Any]
) -> pl.DataFrame:
    """
    Give every entity a row in every frame of ``index``; missing cells are null.

    Output is frame-major, entities in order of first appearance.
    """
    frames = pl.Series(frame_field, list(index), dtype=df.schema[frame_field]).to_frame()
    keys = list(key)
    grid = df.select(keys).unique(maintain_order=True).join(frames, how="cross") if keys else frames
    out = _left_join_ordered(grid, df, on=[*keys, frame_field])
    return out.sort(frame_field, maintain_order=True).select(df.columns)


def frame_map(
    df: pl.DataFrame,
    frame_field: str,
    key: Sequence[str],
    *,
    interpolate: bool = True,
    fields: Sequence[str] | None = None,
    concept: ConceptDescriptor | None = None,
    index: Sequence[Any] | None = None,
) -> FrameGroup:
    """
    Group a flat dataset into frames.

    Args:
        df: Rows keyed by ``(*key, frame_field)``.
        frame_field: Frame column.
        key: Entity key within a frame.
        interpolate: Reindex every entity against the frame index and fill inner gaps.
        fields: Interpolation-relevant columns; defaults to numeric value columns.
        concept: Frame concept, used to build the index at its granularity.
        index: Explicit frame index; defaults to frame_index(df).

    Returns:
        FrameGroup: One frame per index value, in index order.
    """
    full_index = list(index) if index is not None else frame_index(df, frame_field, concept)
    if interpolate and df.height > 0:
        df = reindex_frames(df, frame_field, key, full_index)
        df = interpolate_frame(
            df, list(fields) if fields is not None else _numeric_fields(df, frame_field, key), by=key
        )
    return FrameGroup.from_frame(df, frame_field, key, index=full_index)


def interpolate_group(group: FrameGroup, fields: Sequence[str] | None = None) -> FrameGroup:
    """Fill inner gaps of ``fields`` per entity across the frames of ``group``."""
    flat = group.flatten()
    if flat.height == 0:
        return group
    if fields is None:
        fields = _numeric_fields(flat, group.frame_field, group.key)
    return group.regroup(interpolate_frame(flat, fields, by=group.key))


def _satisfies(frame: pl.DataFrame, required: Sequence[str]) -> bool:
    if frame.height == 0:
        return False
    if not required:
        return True
    return frame.drop_nulls(subset=list(required)).height > 0


def frame_extent(group: FrameGroup, required: Sequence[str] = ()) -> tuple[int, int] | None:
    """
    First and last frame position having at least one row with all ``required`` fields.

    Must run before filter_required, which drops the partially-filled rows this inspects.
    """
    hits = [i for i, frame in enumerate(group.values()) if _satisfies(frame, required)]
    if not hits:
        return None
    return hits[0], hits[-1]


def extrapolate(
    group: FrameGroup,
    fields: Sequence[str] | None = None,
    limit: bool | int = True,
    required: Sequence[str] = (),
) -> FrameGroup:
    """
    Extend each entity's first/last known value over its leading/trailing nulls.

    Args:
        group: Frames, typically after frame_map.
        fields: Columns to extend; defaults to all value columns.
        limit: True for unbounded, an integer to extend at most that many frames,
            False or 0 to disable.
        required: Fields the consuming marker requires; extension stays within
            frame_extent(group, required).

    Examples:
        >>> import polars as pl
        >>> from chartframe.frame.group import FrameGroup
        >>> df = pl.DataFrame({"geo": ["a"] * 3, "year": [1, 2, 3], "pop": [None, 5.0, None]})
        >>> g = FrameGroup.from_frame(df, "year", ["geo"])
        >>> out = extrapolate(g)
        >>> [out[y]["pop"][0] for y in (1, 2, 3)]
        [5.0, 5.0, 5.0]
    """
    if limit is False or (not isinstance(limit, bool) and limit <= 0):
        return group
    extent = frame_extent(group, required)
    if extent is None:
        return group
    n = None if limit is True else int(limit)
    lo, hi = extent

    flat = group.flatten(with_position=True)
    if fields is None:
        fields = _value_fields(flat.columns, group.frame_field, group.key)
    keys = list(group.key)

    def windowed(expr: pl.Expr) -> pl.Expr:
        return expr.over(keys) if keys else expr

    within = pl.col(FRAME_POS).is_between(lo, hi)
    exprs: list[pl.Expr] = []
    for f in fields:
        known = pl.col(f).is_not_null().cast(pl.Int8)
        seen_before = windowed(known.cum_max())
        seen_after = windowed(known.cum_max(reverse=True))
        exprs.append(
            pl.when(pl.col(f).is_not_null())
            .then(pl.col(f))
            .when(within & (seen_after == 0))
            .then(windowed(pl.col(f).forward_fill(limit=n)))
            .when(within & (seen_before == 0))
            .then(windowed(pl.col(f).backward_fill(limit=n)))
            .otherwise(pl.col(f))
            .alias(f)
        )
    return group.regroup(flat.with_columns(exprs))


def filter_required(group: FrameGroup, required: Sequence[str]) -> FrameGroup:
    """Drop rows missing any required field, frame by frame."""
    if not required:
        return group
    subset = list(required)
    return group.map(lambda _, frame: frame.drop_nulls(subset=subset))


def order(group: FrameGroup, order_by: Sequence[OrderSpec]) -> FrameGroup:
    return group.map(lambda _, frame: order_frame(frame, order_by))


def interpolate_towards(
    before: pl.DataFrame,
    after: pl.DataFrame,
    mu: float,
    *,
    key: Sequence[str],
    frame_field: str,
    value: Any,
) -> pl.DataFrame:
    """
    Blend the rows of ``before`` towards the matching rows (same key) of ``after``.

    Numeric fields present on both sides become ``before + (after - before) * mu``;
    rows or cells without a counterpart keep their ``before`` value. Frames without an
    entity key pair their rows by position. The frame column
    is set to ``value``.
    """
    fields = _numeric_fields(before, frame_field, key)
    out = before
    if fields and after.height > 0:
        on = list(key)
        left = before
        right = after.select([*on, *(pl.col(f).alias(f + _AFTER) for f in fields)])
        if not on:
            # without an entity key, rows pair up by position
            left = before.with_row_index(_POS)
            right = right.with_row_index(_POS)
            on = [_POS]
        joined = _left_join_ordered(left, right, on=on)
        out = joined.with_columns(
            [
                pl.when(pl.col(f).is_not_null() & pl.col(f + _AFTER).is_not_null())
                .then(pl.col(f) + (pl.col(f + _AFTER) - pl.col(f)) * mu)
                .otherwise(pl.col(f))
                .alias(f)
                for f in fields
            ]
        ).drop([f + _AFTER for f in fields])
        if not key:
            out = out.drop(_POS)
    dtype = before.schema[frame_field]
    # fractional positions between integer frames (e.g. year 2000.4)
    if dtype.is_integer() and not float(value).is_integer():
        dtype = pl.Float64
    return out.with_columns(pl.lit(value, dtype=dtype).alias(frame_field))


def current_frame(group: FrameGroup, value: Any) -> pl.DataFrame:
    """
    Frame shown for ``value``.

    The exact frame when ``value`` is a frame of the group; a blend of the frames at
    ``floor(step)`` and ``ceil(step)`` when it falls between two frames; otherwise an
    empty frame with the group's schema.
    """
    if len(group) == 0 or value is None:
        return group.empty_frame()
    if value in group:
        return group[value]
    scale = StepScale(group.frame_values)
    if not scale.includes(value):
        return group.empty_frame()
    step = scale(value)
    lo, hi = math.floor(step), math.ceil(step)
    before = group[scale.values[lo]]
    after = group[scale.values[hi]]
    return interpolate_towards(
        before, after, step - lo, key=group.key, frame_field=group.frame_field, value=value
    )


def differentiate(group: FrameGroup, field: str) -> FrameGroup:
    """
    Replace ``field`` with its change since the previous frame, per entity.

    The first frame gets 0 for every row with a value. Expects interpolated input; rows
    without a counterpart in the previous frame get null.

    Examples:
        >>> import polars as pl
        >>> from chartframe.frame.group import FrameGroup
        >>> df = pl.DataFrame({"geo": ["a"] * 3, "year": [1, 2, 3], "x": [10, 12, 15]})
        >>> g = differentiate(FrameGroup.from_frame(df, "year", ["geo"]), "x")
        >>> [g[y]["x"][0] for y in (1, 2, 3)]
        [0, 2, 3]
    """
    keys = list(group.key)
    frames: list[tuple[Any, pl.DataFrame]] = []
    prev: pl.DataFrame | None = None
    for value, frame in group.items():
        if prev is None:
            diffed = frame.with_columns((pl.col(field) - pl.col(field)).alias(field))
        elif keys:
            right = prev.select([*keys, pl.col(field).alias(_PREV)])
            diffed = (
                _left_join_ordered(frame, right, on=keys)
                .with_columns((pl.col(field) - pl.col(_PREV)).alias(field))
                .drop(_PREV)
            )
        else:
            last = prev.get_column(field)[0] if prev.height else None
            diffed = frame.with_columns((pl.col(field) - pl.lit(last)).alias(field))
        frames.append((value, diffed))
        prev = frame
    return group.with_frames(frames)


def marker_limits(
    group: FrameGroup, marker_keys: Iterable[MarkerKey] | None = None
) -> dict[MarkerKey, tuple[Any, Any]]:
    """First and last frame value per marker key."""
    return group.marker_extents(marker_keys)
