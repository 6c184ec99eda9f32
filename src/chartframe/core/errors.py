"""
Exception types raised by scale resolution, value parsing, ordering and playback.

Provides typed exceptions for chartframe failures:
- ScaleTypeError for scale types rejected by ``allowed_types`` under strict settings.
- ConfigParseError for config values that cannot be parsed for their concept.
- OrderError for malformed order specifications.
- PlaybackError for playback ticks that failed and halted the engine.
- SettingsError for invalid engine settings.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Misconfigured scale types are non-fatal by default: the resolver logs a warning
      and resolves the type to None. ScaleTypeError is only raised when
      ``EngineSettings.strict_scale_types`` is enabled.

Examples:
    Catch a parse failure for a time concept.

    >>> from chartframe.core.errors import ConfigParseError
    >>> from chartframe.data.values import parse_config_value
    >>> from chartframe.data.concepts import ConceptDescriptor
    >>> year = ConceptDescriptor(concept="year", concept_type="time")
    >>> try:
    ...     parse_config_value("not-a-year", year)
    ... except ConfigParseError as e:
    ...     msg = str(e)
    >>> "year" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "ChartframeError",
    "ScaleTypeError",
    "ConfigParseError",
    "OrderError",
    "PlaybackError",
    "SettingsError",
]


class ChartframeError(Exception):
    """Base class for chartframe errors."""


class ScaleTypeError(ChartframeError, ValueError):
    """Resolved scale type is not a member of the configured allowed types."""


class ConfigParseError(ChartframeError, ValueError):
    """A config value could not be parsed for its concept (e.g. a malformed date)."""


class OrderError(ChartframeError, ValueError):
    """Order specification is malformed (unknown direction or empty field name)."""


class PlaybackError(ChartframeError, RuntimeError):
    """Playback tick failed; playback was stopped before the error propagated."""


class SettingsError(ChartframeError, ValueError):
    """Engine settings are invalid (e.g. negative speed)."""
