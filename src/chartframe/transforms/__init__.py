"""
chartframe.transforms: record-level transforms shared by the engines.

## Public API
- interpolate: gap interpolation over ordered records (and its Polars rendition).
- order: stable multi-key ordering with direction shorthands.
- pipeline: ordered pipelines of named transforms.

## Notes
- All transforms are pure or in-place on the given collection; none performs IO.
"""

from __future__ import annotations

from .interpolate import INTERPOLATED_KEY, interpolate_frame, interpolate_records
from .order import Direction, OrderKey, normalize_order, order_frame, order_records
from .pipeline import TransformPipeline

__all__ = [
    "INTERPOLATED_KEY",
    "interpolate_records",
    "interpolate_frame",
    "Direction",
    "OrderKey",
    "normalize_order",
    "order_records",
    "order_frame",
    "TransformPipeline",
]
