"""
chartframe.scale: scale type inference, resolution and value mappings.

## Responsibilities
- Infer a ScaleType from config, concept metadata and data through an ordered rule table.
- Resolve domain, range and zoomed domain into an immutable ResolvedScale.
- Build callable mappings (continuous, ordinal, point, band) and export Altair scales.

## Examples
```python
from chartframe.scale import ScaleResolver
resolver = ScaleResolver({"type": "log"}, source)  # doctest: +SKIP
resolver.resolved.mapping()(100.0)  # doctest: +SKIP
```
"""

from __future__ import annotations

from .models import ResolvedScale, ScaleConfig
from .resolver import ScaleResolver, SizeScaleResolver, resolve_scale
from .types import ScaleType
from .vega import to_altair_scale

__all__ = [
    "ScaleType",
    "ScaleConfig",
    "ResolvedScale",
    "ScaleResolver",
    "SizeScaleResolver",
    "resolve_scale",
    "to_altair_scale",
]
