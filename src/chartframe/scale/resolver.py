"""
Scale resolution: (config, concept metadata, observed data domain) -> ResolvedScale.

Responsibilities
- Infer the scale type through the ordered rule table in chartframe.scale.types, force
  the ordinal default for constant data, and substitute a symmetric-log type for log
  scales whose domain crosses zero.
- Resolve domain (config > data > default, with zero-baseline), range (config >
  identity for constant data > kind default) and zoomed domain.
- Cache every derived value against a fingerprint of (config, data version); changes to
  either are picked up on the next read.

Notes
- A type outside ``allowed_types`` is non-fatal: the resolved type is None, a warning is
  logged and recorded in ``ResolvedScale.issues``. Under
  ``EngineSettings.strict_scale_types`` a ScaleTypeError is raised instead.
- Degenerate domains never raise; see chartframe.scale.mapping.

Examples:
    >>> import polars as pl
    >>> from chartframe.data.source import PolarsDataSource
    >>> from chartframe.data.concepts import ConceptDescriptor
    >>> from chartframe.scale.resolver import ScaleResolver
    >>> src = PolarsDataSource(pl.DataFrame({"gdp": [-2.0, 8.0]}), concept="gdp",
    ...     concepts={"gdp": ConceptDescriptor(concept="gdp", concept_type="measure")})
    >>> ScaleResolver({"type": "log"}, src).type
    <ScaleType.GENERIC_LOG: 'generic_log'>
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from chartframe.core.config import EngineSettings
from chartframe.core.constants import (
    CATEGORY10,
    DEFAULT_CONTINUOUS_RANGE,
    DEFAULT_DOMAIN,
    SIZE_POINT_RANGE,
    SIZE_RANGE,
)
from chartframe.core.derived import DerivedCache
from chartframe.core.errors import ScaleTypeError
from chartframe.core.hashing import fingerprint, hash_config
from chartframe.data.source import DataSource
from chartframe.data.values import format_config_value, is_number, parse_config_value

from .mapping import ScaleMapping
from .models import ResolvedScale, ScaleConfig
from .types import (
    DISCRETE_TYPES,
    InferenceInput,
    ScaleType,
    infer_scale_type,
    is_one_sided,
    scale_type_from_value,
)

__all__ = [
    "ScaleResolver",
    "SizeScaleResolver",
    "resolve_scale",
]

logger = logging.getLogger(__name__)


class ScaleResolver:
    """
    Lazily resolves one encoding's scale.

    Args:
        config (ScaleConfig | Mapping | None): Scale configuration; mappings are validated
            into a ScaleConfig which is then owned (and may be mutated) by the resolver.
        data (DataSource): Data feeding the encoding.
        settings (EngineSettings | None): Engine defaults (ordinal default, strictness).
        ordinal_scale (str | ScaleType | None): Per-caller ordinal default overriding
            the class and settings default.
    """

    # Ordinal default for this kind of encoding; None defers to settings.
    ordinal_scale: ScaleType | None = None
    # Type used when the config names none (before concept-based inference).
    default_type: ScaleType | None = None

    def __init__(
        self,
        config: ScaleConfig | Mapping[str, Any] | None,
        data: DataSource,
        *,
        settings: EngineSettings | None = None,
        ordinal_scale: str | ScaleType | None = None,
    ) -> None:
        if isinstance(config, ScaleConfig):
            self.config = config
        else:
            self.config = ScaleConfig.model_validate(dict(config or {}))
        self.data = data
        self.settings = settings or EngineSettings()
        self._ordinal = (
            scale_type_from_value(ordinal_scale)
            or self.ordinal_scale
            or ScaleType(self.settings.ordinal_scale)
        )
        self._cache = DerivedCache()

    # -- caching ------------------------------------------------------------

    def inputs_fingerprint(self) -> str:
        """Fingerprint of everything resolution reads (config JSON, data identity and version)."""
        return fingerprint(
            hash_config(self.config.model_dump(mode="json")), id(self.data), self.data.version
        )

    def _derived(self, name: str, compute: Any) -> Any:
        return self._cache.get(name, self.inputs_fingerprint(), compute)

    # -- type -----------------------------------------------------------------

    @property
    def ordinal_default(self) -> ScaleType:
        return self._ordinal

    def scale_type_no_generic_log(self) -> ScaleType:
        """Inferred type before log/zero-crossing substitution and allowed-type checks."""
        if self.data.is_constant():
            return self._ordinal
        chosen, rule = infer_scale_type(
            InferenceInput(
                configured=self.config.type,
                default_type=self.default_type,
                concept=self.data.concept_props,
                ordinal_default=self._ordinal,
            )
        )
        logger.debug("scale type %s chosen by rule %s", chosen.value, rule)
        return chosen

    def is_discrete(self) -> bool:
        return self.scale_type_no_generic_log() in DISCRETE_TYPES

    def _compute_type(self) -> tuple[ScaleType | None, tuple[str, ...]]:
        scale_type = self.scale_type_no_generic_log()
        if scale_type is ScaleType.LOG and not is_one_sided(self.domain):
            scale_type = ScaleType.GENERIC_LOG

        allowed = self.config.allowed_types
        if allowed is None:
            return scale_type, ()
        allowed_types = {scale_type_from_value(a) for a in allowed}
        if scale_type in allowed_types:
            return scale_type, ()

        msg = (
            f"Scale type {scale_type.value!r} not in allowed types {list(allowed)!r}; "
            "please change the scale type."
        )
        if self.settings.strict_scale_types:
            raise ScaleTypeError(msg)
        logger.warning(msg)
        return None, (msg,)

    @property
    def type(self) -> ScaleType | None:
        """Resolved type; None when the type is not allowed (misconfigured scale)."""
        return self._derived("type", self._compute_type)[0]

    @property
    def issues(self) -> tuple[str, ...]:
        return self._derived("type", self._compute_type)[1]

    # -- domain ---------------------------------------------------------------

    def _compute_domain(self) -> list[Any]:
        props = self.data.concept_props
        if self.config.domain:
            return [parse_config_value(v, props) for v in self.config.domain]
        data_domain = self.data.domain
        if data_domain:
            # zero-baseline replaces the value closest to zero, e.g. for bar charts and
            # bubble sizes; only for one-sided numeric continuous domains
            if (
                self.config.zero_baseline
                and not self.is_discrete()
                and all(is_number(v) for v in data_domain)
                and is_one_sided(data_domain)
            ):
                domain = list(data_domain)
                closest = min(range(len(domain)), key=lambda i: abs(domain[i]))
                domain[closest] = 0
                return domain
            return list(data_domain)
        if self.is_discrete():
            return []
        return list(DEFAULT_DOMAIN)

    @property
    def domain(self) -> list[Any]:
        return self._derived("domain", self._compute_domain)

    def set_domain(self, domain: Sequence[Any] | None) -> None:
        props = self.data.concept_props
        self.config.domain = (
            None if domain is None else [format_config_value(v, props) for v in domain]
        )

    def _compute_zoomed(self) -> list[Any]:
        if self.config.zoomed:
            props = self.data.concept_props
            return [parse_config_value(v, props) for v in self.config.zoomed]
        return self.domain

    @property
    def zoomed(self) -> list[Any]:
        return self._derived("zoomed", self._compute_zoomed)

    def set_zoomed(self, zoomed: Sequence[Any] | None) -> None:
        props = self.data.concept_props
        self.config.zoomed = (
            None if zoomed is None else [format_config_value(v, props) for v in zoomed]
        )

    # -- range ------------------------------------------------------------------

    def _default_range(self) -> list[Any]:
        if self.type is ScaleType.ORDINAL:
            return list(CATEGORY10)
        return list(DEFAULT_CONTINUOUS_RANGE)

    def _compute_range(self) -> list[Any]:
        if self.config.range is not None:
            return list(self.config.range)
        # constant data maps onto itself
        if self.data.is_constant():
            return self.domain
        return self._default_range()

    @property
    def range(self) -> list[Any]:
        return self._derived("range", self._compute_range)

    def set_range(self, range_: Sequence[Any] | None) -> None:
        self.config.range = None if range_ is None else list(range_)

    # -- derived scale ----------------------------------------------------------

    @property
    def clamp(self) -> bool:
        return self.config.clamp

    @property
    def zero_baseline(self) -> bool:
        return self.config.zero_baseline

    def _compute_resolved(self) -> ResolvedScale:
        return ResolvedScale(
            type=self.type,
            domain=self.domain,
            range=self.range,
            zoomed=self.zoomed,
            is_discrete=self.is_discrete(),
            clamp=self.clamp,
            issues=self.issues,
        )

    @property
    def resolved(self) -> ResolvedScale:
        return self._derived("resolved", self._compute_resolved)

    @property
    def mapping(self) -> ScaleMapping:
        return self._derived("mapping", lambda: self.resolved.mapping())

    def clamp_to_domain(self, value: Any) -> Any:
        return self.resolved.clamp_to_domain(value)

    def domain_includes(self, value: Any) -> bool:
        return self.resolved.domain_includes(value)


class SizeScaleResolver(ScaleResolver):
    """
    Size encodings: square-root by default, point as ordinal fallback, radius ranges.

    The range defaults to ``[1, 20]`` for point scales and ``[0, 20]`` otherwise unless
    configured; unlike other scales, constant data does not map onto itself.
    """

    ordinal_scale = ScaleType.POINT
    default_type = ScaleType.SQRT

    def _compute_range(self) -> list[Any]:
        if self.config.range is not None:
            return list(self.config.range)
        if self.type is ScaleType.POINT:
            return list(SIZE_POINT_RANGE)
        return list(SIZE_RANGE)


def resolve_scale(
    config: ScaleConfig | Mapping[str, Any] | None,
    data: DataSource,
    *,
    settings: EngineSettings | None = None,
    ordinal_scale: str | ScaleType | None = None,
) -> ResolvedScale:
    """One-shot resolution without keeping a resolver around."""
    return ScaleResolver(config, data, settings=settings, ordinal_scale=ordinal_scale).resolved
