"""
FrameEngine: step-based playback over a frame dimension, plus the frame transforms.

The engine maps the ordered distinct values of a frame concept (years, dates, labels) to
steps ``0..step_count-1`` and drives playback as a two-state machine (stopped/playing)
with an ``immediate`` flag for un-animated jumps. It owns no data; it reads a DataSource
for the frame concept and exposes pure transforms for the marker's pipeline.

Responsibilities
- Current value/step derivation from FrameConfig (parsed and clamped through the frame
  scale), defaulting to the first frame of the domain.
- Action-style mutations (set_step, set_value, set_speed, snap, play/pause, ...). Each
  action is atomic: observers run once, after the outermost action completes.
- Observers: the playback ticker (reschedules on playing/speed changes) and the config
  loopback (writes the derived value back into config once data is fulfilled).
- Transforms: frame_map, interpolate, extrapolate, filter_required, current_frame,
  differentiate, registered on a TransformPipeline under ``"<name>.<transform>"``
  (``"<field>.differentiate"`` for differentiation).

Notes
- Ticks are honoured only while playing and once the driving marker is fulfilled.
- dispose() (or leaving a ``with`` block) cancels the ticker and detaches observers;
  later ticks are no-ops.
- A tick that raises stops playback, logs the exception and re-raises it as
  PlaybackError.

Examples:
    >>> import polars as pl
    >>> from chartframe.data.source import PolarsDataSource
    >>> from chartframe.frame.engine import FrameEngine
    >>> from chartframe.frame.scheduler import ManualScheduler
    >>> src = PolarsDataSource(pl.DataFrame({"year": [2000, 2001, 2002]}), concept="year")
    >>> sched = ManualScheduler()
    >>> with FrameEngine({"speed": 100}, src, scheduler=sched) as engine:
    ...     engine.play()
    ...     sched.advance(200)
    ...     engine.value, engine.playing
    (2002, True)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Protocol

import polars as pl

from chartframe.core.config import EngineSettings
from chartframe.core.derived import DerivedCache
from chartframe.core.errors import PlaybackError
from chartframe.core.typing import MarkerKey
from chartframe.data.concepts import DataState
from chartframe.data.source import DataSource
from chartframe.scale.models import ScaleConfig
from chartframe.scale.resolver import ScaleResolver
from chartframe.transforms.pipeline import Transform, TransformPipeline

from . import transforms
from .group import FrameGroup
from .models import FrameConfig, PlaybackState
from .playback import next_step_transition, start_transition, stop_transition
from .scheduler import AsyncioScheduler, Scheduler, TickHandle
from .select import splash_filter
from .step_scale import StepScale

__all__ = ["FrameEngine", "Reaction", "HasState"]

logger = logging.getLogger(__name__)

_UNSET = object()


class HasState(Protocol):
    """Anything exposing a data availability state (a marker, a data source)."""

    @property
    def state(self) -> DataState: ...


class Reaction:
    """
    Runs ``effect(value)`` whenever ``expression()`` changes between two runs.

    The first value is recorded at construction without running the effect.
    """

    def __init__(self, name: str, expression: Callable[[], Any], effect: Callable[[Any], None]):
        self.name = name
        self._expression = expression
        self._effect = effect
        self._last = expression()

    def run(self) -> None:
        value = self._expression()
        if value == self._last:
            return
        self._last = value
        self._effect(value)


class FrameEngine:
    """
    Playback state machine and transform provider for one frame encoding.

    Args:
        config (FrameConfig | Mapping | None): Frame configuration; mappings are validated.
            The engine owns and mutates it.
        data (DataSource): Source of the frame concept (e.g. ``year`` over ``geo, year``).
        scale_config (ScaleConfig | Mapping | None): Configuration of the frame scale.
        marker (HasState | None): Whose data state gates ticks and loopback; defaults to
            the engine itself (the data state).
        scheduler (Scheduler | None): Tick scheduler; defaults to AsyncioScheduler.
        settings (EngineSettings | None): Fallbacks for unset config fields.
        fields (Sequence[str] | None): Interpolation-relevant fields; numeric fields when None.
        required (Sequence[str]): Fields every displayed row must have.
        name (str): Prefix of the engine's transforms in a pipeline.
    """

    def __init__(
        self,
        config: FrameConfig | Mapping[str, Any] | None,
        data: DataSource,
        *,
        scale_config: ScaleConfig | Mapping[str, Any] | None = None,
        marker: HasState | None = None,
        scheduler: Scheduler | None = None,
        settings: EngineSettings | None = None,
        fields: Sequence[str] | None = None,
        required: Sequence[str] = (),
        name: str = "frame",
    ) -> None:
        if isinstance(config, FrameConfig):
            self.config = config
        else:
            self.config = FrameConfig.model_validate(dict(config or {}))
        self.data = data
        self.settings = settings or EngineSettings()
        self.scale = ScaleResolver(scale_config, data, settings=self.settings)
        self.marker = marker
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.fields = list(fields) if fields is not None else None
        self.required = tuple(required)
        self.name = name

        self._playback = PlaybackState()
        self._ticker: TickHandle | None = None
        self._cache = DerivedCache()
        self._depth = 0
        self._disposed = False
        self._reactions: list[Reaction] = [
            Reaction("frame playback timer", lambda: (self.playing, self.speed), self._reschedule),
            Reaction("frame config loopback", self._loopback_value, lambda _: self.sync_config()),
        ]

    # -- lifecycle ------------------------------------------------------------

    def dispose(self) -> None:
        """Cancel the pending tick and detach observers. Safe to call more than once."""
        self._cancel_ticker()
        self._reactions.clear()
        self._playback = replace(self._playback, playing=False)
        self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __enter__(self) -> FrameEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    @contextmanager
    def _action(self, name: str) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
        if self._depth == 0:
            logger.debug("frame action %s: value=%r playing=%s", name, self.config.value, self.playing)
            for reaction in list(self._reactions):
                reaction.run()

    # -- observers --------------------------------------------------------------

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _reschedule(self, tracked: tuple[bool, float]) -> None:
        playing, speed = tracked
        self._cancel_ticker()
        if playing and not self._disposed:
            self._ticker = self.scheduler.call_every(speed, self._on_tick)

    def _on_tick(self) -> None:
        if self._disposed or not self.playing:
            return
        try:
            self.next_step()
        except Exception as exc:
            logger.exception("frame playback tick failed; stopping playback")
            self.stop_playing()
            raise PlaybackError(f"playback tick failed at step {self.config.value!r}") from exc

    def _loopback_value(self) -> Any:
        if self.ready:
            return self.value
        return _UNSET

    def sync_config(self) -> bool:
        """
        Write the derived current value back into config.

        Only once the driving marker is fulfilled and ``value`` was explicitly set on the
        config; skipped when the config already parses to the derived value.

        Returns:
            bool: Whether config was written.
        """
        if self._disposed or not self.ready or "value" not in self.config.model_fields_set:
            return False
        value = self.value
        if value is None:
            return False
        if self.data.parse_value(self.config.value) == value:
            return False
        self.config.value = self.data.format_value(value)
        return True

    # -- state ------------------------------------------------------------------

    @property
    def state(self) -> DataState:
        return self.data.state

    @property
    def ready(self) -> bool:
        source = self.marker if self.marker is not None else self
        return DataState(source.state) is DataState.FULFILLED

    @property
    def playing(self) -> bool:
        return self._playback.playing

    @property
    def immediate(self) -> bool:
        return self._playback.immediate

    @property
    def speed(self) -> float:
        return self.config.speed if self.config.speed is not None else self.settings.speed

    @property
    def loop(self) -> bool:
        return self.config.loop if self.config.loop is not None else self.settings.loop

    @property
    def playback_steps(self) -> int:
        if self.config.playback_steps is not None:
            return self.config.playback_steps
        return self.settings.playback_steps

    @property
    def interpolate(self) -> bool:
        if self.config.interpolate is not None:
            return self.config.interpolate
        return self.settings.interpolate

    @property
    def splash(self) -> bool:
        return self.config.splash if self.config.splash is not None else self.settings.splash

    @property
    def frame_field(self) -> str:
        return self.data.concept or self.name

    @property
    def row_key_dims(self) -> list[str]:
        """Space dimensions other than the frame concept (the entity key of a frame)."""
        return [d for d in self.data.space if d != self.data.concept]

    # -- value and steps ----------------------------------------------------------

    def _derived(self, name: str, compute: Callable[[], Any]) -> Any:
        return self._cache.get(name, self.scale.inputs_fingerprint(), compute)

    def parse_value(self, value: Any) -> Any:
        return self.data.parse_value(value)

    def format_value(self, value: Any) -> Any:
        return self.data.format_value(value)

    @property
    def value(self) -> Any:
        """Current frame value: config value parsed and clamped, else the first domain value."""
        if self.config.value is not None:
            return self.scale.clamp_to_domain(self.parse_value(self.config.value))
        domain = self.scale.domain
        return domain[0] if domain else None

    @property
    def domain_values(self) -> list[Any]:
        """Frame values with data, in order, limited to the frame scale's domain."""
        return self._derived(
            "domain_values",
            lambda: [v for v, _ in self.data.domain_data if self.scale.domain_includes(v)],
        )

    @property
    def step_scale(self) -> StepScale:
        return self._derived("step_scale", lambda: StepScale(self.domain_values))

    @property
    def step_count(self) -> int:
        return self.step_scale.step_count

    @property
    def step(self) -> float | None:
        return self.step_scale(self.value)

    @property
    def steps_around(self) -> tuple[int, int] | None:
        step = self.step
        if step is None:
            return None
        return math.floor(step), math.ceil(step)

    @property
    def frames_around(self) -> tuple[Any, Any] | None:
        around = self.steps_around
        if around is None:
            return None
        return self.step_scale.invert(around[0]), self.step_scale.invert(around[1])

    def ceil_key_frame(self) -> Any:
        """The frame value at or after the current (possibly fractional) step."""
        step = self.step
        if step is None:
            return None
        return self.step_scale.invert(math.ceil(step))

    # -- actions --------------------------------------------------------------------

    def _assign_value(self, value: Any) -> None:
        parsed = self.parse_value(value)
        if parsed is not None:
            parsed = self.scale.clamp_to_domain(parsed)
        self.config.value = self.format_value(parsed)

    def set_value(self, value: Any) -> None:
        with self._action("set_value"):
            self._assign_value(value)

    def set_step(self, step: float) -> None:
        with self._action("set_step"):
            self._assign_value(self.step_scale.invert(step))

    def set_value_and_stop(self, value: Any) -> None:
        with self._action("set_value_and_stop"):
            self.stop_playing()
            self.set_value(value)

    def set_step_and_stop(self, step: float) -> None:
        with self._action("set_step_and_stop"):
            self.stop_playing()
            self.set_step(step)

    def set_speed(self, speed: float) -> None:
        with self._action("set_speed"):
            self.config.speed = max(0, speed)

    def snap(self) -> None:
        """Round a fractional step to the nearest step."""
        step = self.step
        if step is None:
            return
        self.set_step(math.floor(step + 0.5))

    def start_playing(self) -> None:
        with self._action("start_playing"):
            transition = start_transition(self._playback, self.step, self.step_count)
            if transition.step is not None and self.step_count > 0:
                self.set_step(transition.step)
            self._playback = transition.state

    def stop_playing(self) -> None:
        with self._action("stop_playing"):
            self._playback = stop_transition(self._playback).state

    play = start_playing
    pause = stop_playing

    def toggle(self) -> None:
        if self.playing:
            self.stop_playing()
        else:
            self.start_playing()

    def next_step(self) -> None:
        """One playback tick."""
        with self._action("next_step"):
            transition = next_step_transition(
                self._playback,
                self.step,
                self.step_count,
                self.playback_steps,
                self.loop,
                ready=self.ready,
            )
            self._playback = transition.state
            if transition.step is not None:
                self.set_step(transition.step)

    # -- transforms -------------------------------------------------------------------

    def frame_map(self, df: pl.DataFrame) -> FrameGroup:
        return transforms.frame_map(
            df,
            self.frame_field,
            self.row_key_dims,
            interpolate=self.interpolate,
            fields=self.fields,
            concept=self.data.concept_props,
        )

    def interpolate_frames(self, group: FrameGroup) -> FrameGroup:
        return transforms.interpolate_group(group, self.fields)

    def extrapolate(self, group: FrameGroup) -> FrameGroup:
        return transforms.extrapolate(
            group, self.fields, limit=self.config.extrapolate, required=self.required
        )

    def filter_required(self, group: FrameGroup) -> FrameGroup:
        return transforms.filter_required(group, self.required)

    def current_frame(self, group: FrameGroup) -> pl.DataFrame:
        return transforms.current_frame(group, self.value)

    def differentiator(self, field: str) -> Transform:
        """Transform replacing ``field`` with its per-frame differences."""
        return lambda group: transforms.differentiate(group, field)

    @property
    def transformation_fns(self) -> dict[str, Transform]:
        return {
            "frame_map": self.frame_map,
            "interpolate": self.interpolate_frames,
            "extrapolate": self.extrapolate,
            "filter_required": self.filter_required,
            "current_frame": self.current_frame,
        }

    def pipeline(self, steps: Sequence[str]) -> TransformPipeline:
        """
        A pipeline over ``steps`` with this engine's transforms registered.

        Besides ``"<name>.<transform>"`` stages, every ``"<field>.differentiate"`` stage
        is bound to differentiator(field).
        """
        pipeline = TransformPipeline(steps)
        pipeline.register_many(self.name, self.transformation_fns)
        for step in steps:
            field, _, op = step.rpartition(".")
            if op == "differentiate" and field:
                pipeline.register(step, self.differentiator(field))
        return pipeline

    def marker_limits(
        self, group: FrameGroup, marker_keys: Iterable[MarkerKey] | None = None
    ) -> dict[MarkerKey, tuple[Any, Any]]:
        """First and last frame per marker, on frames before current_frame selection."""
        return transforms.marker_limits(group, marker_keys)

    def splash_filter(self) -> dict[str, dict[str, Any]] | None:
        """Filter pre-loading only the configured frame, when splash is enabled."""
        if not self.splash:
            return None
        return splash_filter(self.data.concept, self.config.value)
