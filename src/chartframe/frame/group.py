"""
FrameGroup: a dataset grouped by frame value, one Polars frame per animation frame.

Each group holds the rows of one frame, keyed by the remaining (non-frame) key
dimensions. Groups are kept in the frames' natural order; when built against a full
index, frames with no contributing rows exist as empty placeholders with the same
schema.

Notes
- FrameGroup is immutable from the outside: transforms return new groups.
- ``flatten`` concatenates frames in order, so per-entity windows over the flattened
  frame (``over(key)``) see rows in frame order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

import polars as pl

from chartframe.core.typing import MarkerKey

__all__ = ["FrameGroup", "FRAME_POS"]

# Temporary column carrying each row's frame position during window computations.
FRAME_POS = "__frame_pos"


class FrameGroup(Mapping[Any, pl.DataFrame]):
    """
    Ordered mapping frame value -> rows of that frame.

    Args:
        frames (Iterable[tuple[Any, pl.DataFrame]]): Frames in natural order.
        frame_field (str): Name of the frame column (e.g. ``"year"``).
        key (Sequence[str]): Row key dimensions within a frame (e.g. ``["geo"]``).
        schema (Mapping[str, pl.DataType]): Column schema; used for empty frames.
    """

    def __init__(
        self,
        frames: Iterable[tuple[Any, pl.DataFrame]],
        *,
        frame_field: str,
        key: Sequence[str],
        schema: Mapping[str, pl.DataType],
    ) -> None:
        self._frames: dict[Any, pl.DataFrame] = dict(frames)
        self.frame_field = frame_field
        self.key: tuple[str, ...] = tuple(key)
        self.schema: dict[str, pl.DataType] = dict(schema)

    @classmethod
    def from_frame(
        cls,
        df: pl.DataFrame,
        frame_field: str,
        key: Sequence[str],
        index: Sequence[Any] | None = None,
    ) -> FrameGroup:
        """
        Group rows by ``frame_field``.

        Args:
            df: Rows containing ``frame_field``.
            frame_field: Frame column.
            key: Row key within a frame.
            index: Full ordered frame index. Frames in the index without rows become
                empty placeholders; when None, observed frame values are used in
                ascending order.
        """
        df = df.filter(pl.col(frame_field).is_not_null()).sort(frame_field, maintain_order=True)
        groups = {k[0]: g for k, g in df.group_by(frame_field, maintain_order=True)}
        empty = pl.DataFrame(schema=df.schema)
        values = list(index) if index is not None else list(groups)
        return cls(
            ((v, groups.get(v, empty)) for v in values),
            frame_field=frame_field,
            key=key,
            schema=df.schema,
        )

    # -- Mapping --------------------------------------------------------------

    def __getitem__(self, value: Any) -> pl.DataFrame:
        return self._frames[value]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return (
            f"FrameGroup(frame_field={self.frame_field!r}, key={self.key!r}, "
            f"frames={len(self)})"
        )

    # -- helpers ----------------------------------------------------------------

    @property
    def frame_values(self) -> list[Any]:
        return list(self._frames)

    def empty_frame(self) -> pl.DataFrame:
        return pl.DataFrame(schema=self.schema)

    def with_frames(self, frames: Iterable[tuple[Any, pl.DataFrame]]) -> FrameGroup:
        return FrameGroup(frames, frame_field=self.frame_field, key=self.key, schema=self.schema)

    def map(self, fn: Callable[[Any, pl.DataFrame], pl.DataFrame]) -> FrameGroup:
        """Apply ``fn(frame_value, frame)`` to every frame, keeping order and placeholders."""
        out = [(v, fn(v, f)) for v, f in self._frames.items()]
        schema = out[0][1].schema if out else self.schema
        return FrameGroup(out, frame_field=self.frame_field, key=self.key, schema=schema)

    def flatten(self, *, with_position: bool = False) -> pl.DataFrame:
        """
        Concatenate frames in order.

        Args:
            with_position: Add a FRAME_POS column with each row's frame position.
        """
        parts = [
            f.with_columns(pl.lit(i, dtype=pl.Int64).alias(FRAME_POS)) if with_position else f
            for i, f in enumerate(self._frames.values())
            if f.height > 0
        ]
        if not parts:
            empty = self.empty_frame()
            if with_position:
                empty = empty.with_columns(pl.lit(None, dtype=pl.Int64).alias(FRAME_POS))
            return empty
        return pl.concat(parts, how="vertical_relaxed")

    def regroup(self, df: pl.DataFrame) -> FrameGroup:
        """Split a flattened frame back into a group over this group's frame index."""
        if FRAME_POS in df.columns:
            df = df.drop(FRAME_POS)
        return FrameGroup.from_frame(df, self.frame_field, self.key, index=self.frame_values)

    def marker_extents(
        self, marker_keys: Iterable[MarkerKey] | None = None
    ) -> dict[MarkerKey, tuple[Any, Any]]:
        """
        First and last frame value in which each marker (row key) has a row.

        Args:
            marker_keys: Keys to report; all keys found when None. Keys that never
                occur are omitted.
        """
        extents: dict[MarkerKey, tuple[Any, Any]] = {}
        for value, frame in self._frames.items():
            if frame.height == 0:
                continue
            for row_key in frame.select(list(self.key)).iter_rows():
                first = extents.get(row_key, (value, value))[0]
                extents[row_key] = (first, value)
        if marker_keys is None:
            return extents
        wanted = [tuple(k) for k in marker_keys]
        return {k: extents[k] for k in wanted if k in extents}
