"""
chartframe: the data core of an interactive chart library.

Resolves scale specifications into concrete mappings and drives a frame (animation)
dimension that turns a keyed dataset into a sequence of displayable snapshots.

## Import DAG discipline
- core <- data <- transforms <- scale <- frame.
- Depends on: polars, pydantic, altair (and stdlib).
"""

from __future__ import annotations

from chartframe.core.config import EngineSettings
from chartframe.core.errors import ChartframeError
from chartframe.frame import FrameEngine
from chartframe.scale import ScaleResolver

__all__ = [
    "EngineSettings",
    "ChartframeError",
    "FrameEngine",
    "ScaleResolver",
]

__version__ = "0.1.0"
