"""
chartframe engine defaults.

Defines playback, scale and palette defaults consumed by the scale resolver and the
frame engine. This module is zero-IO and uses only the Python standard library.

Notes:
    - EngineSettings (chartframe.core.config) sources its defaults from here.
    - Speeds are milliseconds between playback ticks.
    - Changes to these constants change the behavior of every unconfigured chart.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_SPEED",
    "DEFAULT_PLAYBACK_STEPS",
    "DEFAULT_LOOP",
    "DEFAULT_INTERPOLATE",
    "DEFAULT_SPLASH",
    "DEFAULT_DOMAIN",
    "DEFAULT_CONTINUOUS_RANGE",
    "CATEGORY10",
    "SIZE_RANGE",
    "SIZE_POINT_RANGE",
    "ENV_PREFIX",
]

# Milliseconds between two playback ticks.
DEFAULT_SPEED: int = 100

# Number of steps advanced per playback tick.
DEFAULT_PLAYBACK_STEPS: int = 1

DEFAULT_LOOP: bool = False
DEFAULT_INTERPOLATE: bool = True
DEFAULT_SPLASH: bool = False

# Fallback domain when the data exposes none.
DEFAULT_DOMAIN: tuple[float, float] = (0.0, 1.0)

# Default range for continuous scales.
DEFAULT_CONTINUOUS_RANGE: tuple[float, float] = (0.0, 1.0)

# Categorical palette used as the default range of ordinal scales.
CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)

# Size scale ranges (radius units).
SIZE_RANGE: tuple[float, float] = (0.0, 20.0)
SIZE_POINT_RANGE: tuple[float, float] = (1.0, 20.0)

ENV_PREFIX: str = "CHARTFRAME_"
