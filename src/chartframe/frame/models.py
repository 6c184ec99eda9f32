"""
Frame configuration and transient playback state.

- FrameConfig: the plain, persisted frame configuration. Unset fields (None) fall back to
  EngineSettings. Mutated by the engine's own actions and by config loopback.
- PlaybackState: process-local playing/immediate flags; never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "FrameConfig",
    "PlaybackState",
]


class FrameConfig(BaseModel):
    """
    Persisted configuration of a frame (animation) encoding.

    Attributes:
        value (Any): Current frame value in config form (e.g. ``"2000"``); None selects
            the first frame of the domain.
        loop (bool | None): Wrap to the first frame after the last.
        speed (float | None): Milliseconds between ticks; 0 means as fast as possible.
        playback_steps (int | None): Steps advanced per tick.
        interpolate (bool | None): Fill gaps between known frames.
        extrapolate (bool | int): Extend known values past the first/last known frame;
            an integer bounds the extension to that many frames.
        splash (bool | None): Pre-load the configured frame before the full dataset.

    Examples:
        >>> from chartframe.frame.models import FrameConfig
        >>> FrameConfig.model_validate({"value": "2000", "playbackSteps": 2}).playback_steps
        2
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, validate_assignment=True)

    value: Any = None
    loop: bool | None = None
    speed: float | None = Field(default=None, ge=0)
    playback_steps: int | None = Field(default=None, ge=1, alias="playbackSteps")
    interpolate: bool | None = None
    extrapolate: bool | int = False
    splash: bool | None = None

    @field_validator("extrapolate")
    @classmethod
    def _non_negative_extrapolate(cls, v: bool | int) -> bool | int:
        if not isinstance(v, bool) and v < 0:
            raise ValueError("extrapolate must be a boolean or a non-negative frame count")
        return v


@dataclass(frozen=True)
class PlaybackState:
    """
    Playback flags.

    Attributes:
        playing (bool): Ticks advance the frame while True.
        immediate (bool): The last jump should not be animated (wrap-around while playing).
    """

    playing: bool = False
    immediate: bool = False
