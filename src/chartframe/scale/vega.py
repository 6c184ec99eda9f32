"""
Export resolved scales as Altair (Vega-Lite) scale specifications.

Renderers built on Altair consume ``alt.Scale`` objects rather than mapping callables.
This module translates a ResolvedScale into one so charts draw with the same type,
domain and range the engine resolved. No marks are built here.

Notes
- ``generic_log`` maps to Vega-Lite ``symlog``; ``time`` maps to ``utc``.
- Datetime domains are emitted as ISO strings, which Vega-Lite parses as dates.
- A misconfigured scale (type None) exports without a type so Vega-Lite infers one.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import altair as alt

from .models import ResolvedScale
from .types import ScaleType

__all__ = ["VEGA_SCALE_TYPES", "to_altair_scale"]

VEGA_SCALE_TYPES: dict[ScaleType, str] = {
    ScaleType.LINEAR: "linear",
    ScaleType.LOG: "log",
    ScaleType.GENERIC_LOG: "symlog",
    ScaleType.SQRT: "sqrt",
    ScaleType.ORDINAL: "ordinal",
    ScaleType.POINT: "point",
    ScaleType.BAND: "band",
    ScaleType.TIME: "utc",
}


def _to_vega_value(v: Any) -> Any:
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    return v


def to_altair_scale(resolved: ResolvedScale, *, zoomed: bool = False) -> alt.Scale:
    """
    Build an ``alt.Scale`` mirroring a resolved scale.

    Args:
        resolved (ResolvedScale): Scale snapshot from a ScaleResolver.
        zoomed (bool): Use the zoomed domain instead of the full domain.

    Returns:
        alt.Scale: Scale spec with type, domain, range, clamp and ``zero=False`` (the
        engine already applied zero-baseline to the domain when configured).
    """
    domain = resolved.zoomed if zoomed else resolved.domain
    kwargs: dict[str, Any] = {
        "domain": [_to_vega_value(v) for v in domain],
        "range": list(resolved.range),
    }
    if resolved.type is not None:
        kwargs["type"] = VEGA_SCALE_TYPES[resolved.type]
    if not resolved.is_discrete:
        kwargs["zero"] = False
        kwargs["clamp"] = resolved.clamp
    return alt.Scale(**kwargs)
