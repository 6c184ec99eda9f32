"""
Core package aggregator for chartframe (constants, errors, settings, hashing, caching, typing).

## Contracts (single source of truth)
- Constants: playback defaults, default domains and ranges, env prefix.
- Errors: ChartframeError and its typed subclasses.
- Config: EngineSettings (env > TOML > defaults).
- Hashing: canonical JSON and fingerprints of config/data inputs.
- Derived: fingerprint-keyed cache for lazily derived values.
- Typing: Record, Domain, MarkerKey aliases.

## Notes
- Zero-IO policy except EngineSettings.from_toml/from_env.
- Naming policy: enum `.value` and field names are lower_snake.

## Downstream usage
- chartframe.scale: caches resolution against `fingerprint(hash_config(...), version)`.
- chartframe.frame: reads playback defaults from EngineSettings.

## Examples
```python
from chartframe.core.config import EngineSettings
settings = EngineSettings.load()  # doctest: +SKIP
settings.speed  # 100 unless overridden by CHARTFRAME_SPEED or chartframe.toml
```
"""
