"""
Step scale: ordered frame values <-> step indices ``0..step_count-1``.

Frame values (years, dates, labels) are not necessarily evenly spaced (leap years,
missing frames), so a two-point linear scale would not do. The step scale is piecewise
over the actual values:

- exact members map to their integer index;
- numeric/temporal values between two members map to a fractional step
  (``3.4`` = 40% of the way from step 3 to step 4);
- ``invert`` is a direct lookup for integral steps and a linear blend of the two
  neighbouring values for fractional steps of continuous frames.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any

from chartframe.data.values import EPOCH, is_number, to_number

__all__ = ["StepScale"]


class StepScale:
    """
    Examples:
        >>> s = StepScale([2000, 2001, 2003])
        >>> s(2001), s(2002), s.invert(2)
        (1, 1.5, 2003)
    """

    def __init__(self, values: Sequence[Any]) -> None:
        self.values: list[Any] = list(values)
        self._index: dict[Any, int] = {v: i for i, v in enumerate(self.values)}
        self._temporal = bool(self.values) and all(isinstance(v, datetime) for v in self.values)
        self.continuous = bool(self.values) and (
            self._temporal or all(is_number(v) for v in self.values)
        )
        self._xs = [to_number(v) for v in self.values] if self.continuous else []

    @property
    def step_count(self) -> int:
        return len(self.values)

    @property
    def range(self) -> list[int]:
        return list(range(self.step_count))

    def __call__(self, value: Any) -> float | None:
        if value is None or not self.values:
            return None
        idx = self._index.get(value)
        if idx is not None:
            return idx
        if not self.continuous:
            return None
        try:
            x = to_number(value)
        except (TypeError, ValueError):
            return None
        if x <= self._xs[0]:
            return 0
        if x >= self._xs[-1]:
            return len(self._xs) - 1
        i = bisect_right(self._xs, x) - 1
        x0, x1 = self._xs[i], self._xs[i + 1]
        return i + (x - x0) / (x1 - x0)

    def includes(self, value: Any) -> bool:
        """True for members and, on continuous scales, for values between the ends."""
        if value is None or not self.values:
            return False
        if value in self._index:
            return True
        if not self.continuous:
            return False
        try:
            x = to_number(value)
        except (TypeError, ValueError):
            return False
        return self._xs[0] <= x <= self._xs[-1]

    def invert(self, step: float | None) -> Any:
        if step is None or not self.values:
            return None
        last = len(self.values) - 1
        step = min(max(step, 0), last)
        lo = math.floor(step)
        frac = step - lo
        if frac == 0:
            return self.values[int(lo)]
        if not self.continuous:
            return self.values[int(math.floor(step + 0.5))]
        x = self._xs[lo] + (self._xs[lo + 1] - self._xs[lo]) * frac
        if self._temporal:
            return EPOCH + timedelta(seconds=x)
        return x

    def __len__(self) -> int:
        return self.step_count
