"""
Periodic tick scheduling for frame playback.

Schedulers run a callback every ``interval_ms`` until the returned handle is cancelled.
A cancelled handle never fires again, including a tick already queued on the loop.

- AsyncioScheduler: chains ``loop.call_later`` on an asyncio event loop (``call_soon``
  for interval 0). A callback that raises is not rescheduled; the exception goes to the
  loop's exception handler.
- ManualScheduler: a virtual clock advanced explicitly, for tests and offline rendering
  (e.g. exporting every frame of an animation without waiting).
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

__all__ = [
    "TickHandle",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
]

Callback = Callable[[], None]


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval_ms: float, callback: Callback) -> TickHandle: ...


class _AsyncioTicker:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval_ms: float, callback: Callback):
        self._loop = loop
        self._delay = max(0.0, interval_ms) / 1000.0
        self._callback = callback
        self._cancelled = False
        self._handle: asyncio.Handle | None = self._schedule()

    def _schedule(self) -> asyncio.Handle:
        if self._delay == 0:
            return self._loop.call_soon(self._fire)
        return self._loop.call_later(self._delay, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = None
        self._callback()
        if not self._cancelled:
            self._handle = self._schedule()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """
    Scheduler bound to an asyncio event loop.

    Args:
        loop: Event loop to schedule on; defaults to the running loop at call time.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_every(self, interval_ms: float, callback: Callback) -> _AsyncioTicker:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTicker(loop, interval_ms, callback)


class _ManualTicker:
    def __init__(self, scheduler: ManualScheduler, interval_ms: float, callback: Callback):
        self.interval_ms = max(0.0, interval_ms)
        self.callback = callback
        self.next_due = scheduler.now + self.interval_ms
        self.cancelled = False
        self._scheduler = scheduler

    def cancel(self) -> None:
        self.cancelled = True
        self._scheduler._forget(self)


class ManualScheduler:
    """
    Virtual-clock scheduler.

    Examples:
        >>> ticks = []
        >>> sched = ManualScheduler()
        >>> handle = sched.call_every(100, lambda: ticks.append(sched.now))
        >>> sched.advance(250)
        >>> ticks
        [100.0, 200.0]
        >>> handle.cancel(); sched.advance(1000); ticks
        [100.0, 200.0]
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._tickers: list[_ManualTicker] = []

    def call_every(self, interval_ms: float, callback: Callback) -> _ManualTicker:
        ticker = _ManualTicker(self, interval_ms, callback)
        self._tickers.append(ticker)
        return ticker

    def _forget(self, ticker: _ManualTicker) -> None:
        if ticker in self._tickers:
            self._tickers.remove(ticker)

    @property
    def pending(self) -> int:
        """Number of live (uncancelled) tickers."""
        return len(self._tickers)

    def advance(self, ms: float) -> None:
        """
        Move the clock forward by ``ms``, firing due ticks in time order.

        Zero-interval tickers fire once per call.
        """
        target = self.now + ms
        for ticker in [t for t in self._tickers if t.interval_ms == 0]:
            if not ticker.cancelled:
                ticker.callback()
        while True:
            due = [t for t in self._tickers if t.interval_ms > 0 and t.next_due <= target]
            if not due:
                break
            ticker = min(due, key=lambda t: t.next_due)
            self.now = ticker.next_due
            ticker.next_due += ticker.interval_ms
            ticker.callback()
        self.now = target
