"""
Value mappings produced by resolved scales.

A mapping turns a domain value into a visual value (position, size, color) and, for
continuous kinds, back again. Mappings are plain callables built from a resolved
type/domain/range; they hold no reference to config or data.

Kinds
- ContinuousMapping: linear, log, symmetric log, sqrt and time; piecewise over
  n-element domains/ranges; optional output clamping; invertible for numeric ranges.
- OrdinalMapping: domain member -> range entry (cycled); unknown members -> None.
- PointMapping / BandMapping: evenly spaced positions across a numeric range.

Notes
- Degenerate inputs never raise: a zero-width domain maps to the middle of the range,
  a single-element domain is widened to [d, d], and an empty discrete domain maps
  everything to None.
- Non-numeric ranges (color lists) on continuous kinds snap to the nearest stop.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

from chartframe.core.constants import DEFAULT_CONTINUOUS_RANGE, DEFAULT_DOMAIN
from chartframe.data.values import EPOCH, is_number, to_number

from .types import ScaleType

__all__ = [
    "ScaleMapping",
    "ContinuousMapping",
    "OrdinalMapping",
    "PointMapping",
    "BandMapping",
    "build_mapping",
]


class ScaleMapping:
    """Base class: callable value -> visual value."""

    has_invert: bool = False

    def __call__(self, value: Any) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError

    def invert(self, value: Any) -> Any:
        raise NotImplementedError(f"{type(self).__name__} has no inverse")


def _sign(x: float) -> float:
    return -1.0 if x < 0 else 1.0


class ContinuousMapping(ScaleMapping):
    """Piecewise continuous mapping over a transformed axis."""

    has_invert = True

    def __init__(
        self,
        kind: ScaleType,
        domain: Sequence[Any],
        range_: Sequence[Any],
        *,
        clamp: bool = False,
        symlog_constant: float = 1.0,
    ) -> None:
        self.kind = kind
        self.clamp = clamp
        self._c = symlog_constant
        domain = list(domain) or list(DEFAULT_DOMAIN)
        if len(domain) == 1:
            domain = domain * 2
        range_ = list(range_) or list(DEFAULT_CONTINUOUS_RANGE)
        if len(range_) == 1:
            range_ = range_ * 2
        n = min(len(domain), len(range_))
        domain, range_ = domain[:n], range_[:n]
        self._temporal = isinstance(domain[0], datetime)
        self._negative_log = kind is ScaleType.LOG and all(
            to_number(d) < 0 for d in domain
        )
        xs = [self._forward(to_number(d)) for d in domain]
        if xs[-1] < xs[0]:
            xs.reverse()
            range_ = list(reversed(range_))
        self.domain = domain
        self.range = range_
        self._xs = xs
        self._numeric_range = all(is_number(r) for r in range_)

    # -- axis transforms -------------------------------------------------

    def _forward(self, x: float) -> float:
        if self.kind is ScaleType.LOG:
            if self._negative_log:
                return -math.log(-x) if x < 0 else math.nan
            return math.log(x) if x > 0 else math.nan
        if self.kind is ScaleType.GENERIC_LOG:
            return _sign(x) * math.log1p(abs(x) / self._c)
        if self.kind is ScaleType.SQRT:
            return _sign(x) * math.sqrt(abs(x))
        return x

    def _backward(self, y: float) -> float:
        if self.kind is ScaleType.LOG:
            return -math.exp(-y) if self._negative_log else math.exp(y)
        if self.kind is ScaleType.GENERIC_LOG:
            return _sign(y) * math.expm1(abs(y)) * self._c
        if self.kind is ScaleType.SQRT:
            return _sign(y) * y * y
        return y

    # -- mapping ------------------------------------------------------------

    @staticmethod
    def _segment(stops: Sequence[float], x: float) -> int:
        i = bisect_right(stops, x) - 1
        return min(max(i, 0), len(stops) - 2)

    def __call__(self, value: Any) -> Any:
        if value is None:
            return None
        x = self._forward(to_number(value))
        if math.isnan(x):
            return None
        i = self._segment(self._xs, x)
        x0, x1 = self._xs[i], self._xs[i + 1]
        t = 0.5 if x1 == x0 else (x - x0) / (x1 - x0)
        if self.clamp:
            t = min(max(t, 0.0), 1.0)
        r0, r1 = self.range[i], self.range[i + 1]
        if self._numeric_range:
            return r0 + (r1 - r0) * t
        return r0 if t < 0.5 else r1

    def invert(self, value: Any) -> Any:
        if value is None:
            return None
        if not self._numeric_range:
            raise NotImplementedError("cannot invert a mapping onto a non-numeric range")
        ys = [float(r) for r in self.range]
        order = sorted(range(len(ys)), key=ys.__getitem__)
        ys_sorted = [ys[k] for k in order]
        xs_sorted = [self._xs[k] for k in order]
        i = self._segment(ys_sorted, float(value))
        y0, y1 = ys_sorted[i], ys_sorted[i + 1]
        t = 0.5 if y1 == y0 else (float(value) - y0) / (y1 - y0)
        if self.clamp:
            t = min(max(t, 0.0), 1.0)
        x = self._backward(xs_sorted[i] + (xs_sorted[i + 1] - xs_sorted[i]) * t)
        if self._temporal:
            return EPOCH + timedelta(seconds=x)
        return x


class OrdinalMapping(ScaleMapping):
    """Domain member -> range entry, cycling through the range."""

    def __init__(self, domain: Sequence[Any], range_: Sequence[Any]) -> None:
        self.domain = list(domain)
        self.range = list(range_)
        self._index = {v: i for i, v in enumerate(self.domain)}

    def __call__(self, value: Any) -> Any:
        i = self._index.get(value)
        if i is None or not self.range:
            return None
        return self.range[i % len(self.range)]


class PointMapping(ScaleMapping):
    """Evenly spaced points from range[0] to range[-1]; a single member sits in the middle."""

    def __init__(self, domain: Sequence[Any], range_: Sequence[Any]) -> None:
        self.domain = list(domain)
        r = list(range_) or list(DEFAULT_CONTINUOUS_RANGE)
        self.start, self.stop = float(r[0]), float(r[-1])
        self._index = {v: i for i, v in enumerate(self.domain)}
        n = len(self.domain)
        self.step = (self.stop - self.start) / max(1, n - 1)
        self._offset = (self.stop - self.start) / 2 if n == 1 else 0.0
        self.bandwidth = 0.0

    def __call__(self, value: Any) -> Any:
        i = self._index.get(value)
        if i is None:
            return None
        return self.start + self._offset + self.step * i


class BandMapping(ScaleMapping):
    """Equal-width bands across the range; maps a member to the start of its band."""

    def __init__(self, domain: Sequence[Any], range_: Sequence[Any]) -> None:
        self.domain = list(domain)
        r = list(range_) or list(DEFAULT_CONTINUOUS_RANGE)
        self.start, self.stop = float(r[0]), float(r[-1])
        self._index = {v: i for i, v in enumerate(self.domain)}
        self.step = (self.stop - self.start) / max(1, len(self.domain))
        self.bandwidth = self.step

    def __call__(self, value: Any) -> Any:
        i = self._index.get(value)
        if i is None:
            return None
        return self.start + self.step * i


def build_mapping(
    kind: ScaleType | None,
    domain: Sequence[Any],
    range_: Sequence[Any],
    *,
    clamp: bool = False,
) -> ScaleMapping:
    """
    Build the mapping for a resolved scale.

    A None kind (misconfigured scale) falls back to an ordinal mapping so rendering can
    still proceed while the configuration error is surfaced elsewhere.
    """
    if kind is ScaleType.POINT:
        return PointMapping(domain, range_)
    if kind is ScaleType.BAND:
        return BandMapping(domain, range_)
    if kind is ScaleType.ORDINAL or kind is None:
        return OrdinalMapping(domain, range_)
    return ContinuousMapping(kind, domain, range_, clamp=clamp)
