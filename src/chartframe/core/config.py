"""
Configuration for the chartframe engines.

Defines EngineSettings, a frozen dataclass carrying the defaults that frame and scale
configs fall back to when a value is not configured. Defaults are sourced from
chartframe.core.constants (the single source of truth).

Precedence
- Environment variables (CHARTFRAME_*) > TOML file > defaults.
- TOML search order: ./chartframe.toml ([engine] table or top-level keys), then
  ./pyproject.toml under [tool.chartframe.engine].

Notes
- Settings are read once by the caller and passed into engines; engines never reload
  them on their own.
- Per-chart FrameConfig/ScaleConfig values always win over these defaults.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from .constants import DEFAULT_INTERPOLATE as CORE_INTERPOLATE
from .constants import DEFAULT_LOOP as CORE_LOOP
from .constants import DEFAULT_PLAYBACK_STEPS as CORE_PLAYBACK_STEPS
from .constants import DEFAULT_SPEED as CORE_SPEED
from .constants import DEFAULT_SPLASH as CORE_SPLASH
from .constants import ENV_PREFIX
from .errors import SettingsError

OrdinalDefault = Literal["ordinal", "point", "band"]

_ORDINAL_DEFAULTS: set[str] = {"ordinal", "point", "band"}


@dataclass(frozen=True)
class EngineSettings:
    """
    Runtime defaults for scale resolution and frame playback.

    Attributes:
        speed (int): Milliseconds between playback ticks (>= 0).
        playback_steps (int): Steps advanced per tick (>= 1).
        loop (bool): Whether playback wraps to the first frame after the last.
        interpolate (bool): Whether frame maps fill gaps by interpolation.
        splash (bool): Whether the first frame is pre-loaded separately.
        ordinal_scale (Literal["ordinal","point","band"]): Ordinal default used when a
            concept is discrete and no scale type is configured.
        strict_scale_types (bool): If True, a scale type outside ``allowed_types``
            raises ScaleTypeError instead of resolving to None with a warning.

    Examples:
        >>> from chartframe.core.config import EngineSettings
        >>> EngineSettings(speed=250)  # doctest: +ELLIPSIS
        EngineSettings(speed=250, ...)
    """

    speed: int = CORE_SPEED
    playback_steps: int = CORE_PLAYBACK_STEPS
    loop: bool = CORE_LOOP
    interpolate: bool = CORE_INTERPOLATE
    splash: bool = CORE_SPLASH
    ordinal_scale: OrdinalDefault = "ordinal"
    strict_scale_types: bool = False

    def __post_init__(self) -> None:
        if self.speed < 0:
            raise SettingsError(f"speed must be >= 0, got {self.speed}")
        if self.playback_steps < 1:
            raise SettingsError(f"playback_steps must be >= 1, got {self.playback_steps}")
        if self.ordinal_scale not in _ORDINAL_DEFAULTS:
            raise SettingsError(
                f"ordinal_scale must be one of {sorted(_ORDINAL_DEFAULTS)}, "
                f"got {self.ordinal_scale!r}"
            )

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: EngineSettings, cfg: dict[str, Any] | None) -> EngineSettings:
        """Apply a loose config mapping onto EngineSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _bool(v: Any) -> bool:
            if isinstance(v, bool):
                return v
            if isinstance(v, (int, float)):
                return bool(v)
            if isinstance(v, str):
                return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
            return False

        def _int(name: str, v: Any) -> int:
            try:
                return int(v)
            except (TypeError, ValueError) as exc:
                raise SettingsError(f"{name} must be an integer, got {v!r}") from exc

        if "speed" in cfg:
            s = replace(s, speed=_int("speed", cfg["speed"]))
        if "playback_steps" in cfg:
            s = replace(s, playback_steps=_int("playback_steps", cfg["playback_steps"]))
        if "loop" in cfg:
            s = replace(s, loop=_bool(cfg["loop"]))
        if "interpolate" in cfg:
            s = replace(s, interpolate=_bool(cfg["interpolate"]))
        if "splash" in cfg:
            s = replace(s, splash=_bool(cfg["splash"]))
        if "ordinal_scale" in cfg and isinstance(cfg["ordinal_scale"], str):
            s = replace(s, ordinal_scale=cfg["ordinal_scale"].strip().lower())  # type: ignore[arg-type]
        if "strict_scale_types" in cfg:
            s = replace(s, strict_scale_types=_bool(cfg["strict_scale_types"]))

        return s

    @classmethod
    def from_env(
        cls, base: EngineSettings | None = None, prefix: str = ENV_PREFIX
    ) -> EngineSettings:
        """
        Build EngineSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - CHARTFRAME_SPEED
            - CHARTFRAME_PLAYBACK_STEPS
            - CHARTFRAME_LOOP (1/0/true/false/yes/no/on/off)
            - CHARTFRAME_INTERPOLATE
            - CHARTFRAME_SPLASH
            - CHARTFRAME_ORDINAL_SCALE ("ordinal" | "point" | "band")
            - CHARTFRAME_STRICT_SCALE_TYPES
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in (
            "speed",
            "playback_steps",
            "loop",
            "interpolate",
            "splash",
            "ordinal_scale",
            "strict_scale_types",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> EngineSettings:
        """
        Build EngineSettings from a TOML file.

        Search order when `path` is None:
            1) ./chartframe.toml (with either an [engine] table or direct keys)
            2) ./pyproject.toml under [tool.chartframe.engine]

        Returns defaults if no file is present.

        Raises:
            SettingsError: If a candidate file exists but is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "chartframe.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise SettingsError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("chartframe", {}).get("engine") if isinstance(tool, dict) else None
            elif "engine" in data and isinstance(data["engine"], dict):
                cfg = data["engine"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> EngineSettings:
        """
        Load EngineSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (chartframe.toml, pyproject.toml).

        Returns:
            EngineSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
