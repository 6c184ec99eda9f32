"""
Pydantic models for scale configuration and resolved scales.

Responsibilities
- ScaleConfig: the plain, persisted scale configuration owned by an encoding. Mutated by
  user interaction (zoom, domain edits) and by config loopback.
- ResolvedScale: derived, immutable snapshot of type/domain/range with its mapping.

Style
- Field names are lower_snake; the camelCase spellings used by chart JSON configs
  (``zeroBaseline``, ``allowedTypes``) are accepted as aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .mapping import ScaleMapping, build_mapping
from .types import ScaleType

__all__ = [
    "ScaleConfig",
    "ResolvedScale",
]


class ScaleConfig(BaseModel):
    """
    Persisted configuration of one scale.

    Attributes:
        type (str | None): Requested scale type name; unsupported names are ignored.
        domain (list | None): Explicit domain in config form (parsed per concept).
        range (list | None): Explicit range.
        zoomed (list | None): Zoomed sub-domain in config form.
        zero_baseline (bool): Force one-sided continuous domains to include zero.
        clamp (bool): Clamp mapped output to the range.
        allowed_types (list[str] | None): Scale types this encoding accepts.

    Examples:
        >>> from chartframe.scale.models import ScaleConfig
        >>> ScaleConfig.model_validate({"type": "log", "zeroBaseline": True}).zero_baseline
        True
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, validate_assignment=True)

    type: str | None = None
    domain: list[Any] | None = None
    range: list[Any] | None = None
    zoomed: list[Any] | None = None
    zero_baseline: bool = Field(default=False, alias="zeroBaseline")
    clamp: bool = False
    allowed_types: list[str] | None = Field(default=None, alias="allowedTypes")


class ResolvedScale(BaseModel):
    """
    Derived scale snapshot. Never mutated; recomputed when its inputs change.

    Attributes:
        type (ScaleType | None): Resolved type; None means the scale is misconfigured
            (the resolved type is not in ``allowed_types``).
        domain (list): ``[lo, hi]`` for continuous types, members for discrete ones.
        range (list): Visual range.
        zoomed (list): Zoomed domain (the domain itself when not zoomed).
        is_discrete (bool): Whether the scale maps categories.
        clamp (bool): Output clamping flag passed to the mapping.
        issues (tuple[str, ...]): Diagnostics collected during resolution.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: ScaleType | None
    domain: list[Any]
    range: list[Any]
    zoomed: list[Any]
    is_discrete: bool
    clamp: bool = False
    issues: tuple[str, ...] = ()

    @property
    def misconfigured(self) -> bool:
        return self.type is None

    def mapping(self) -> ScaleMapping:
        return build_mapping(self.type, self.domain, self.range, clamp=self.clamp)

    def domain_includes(self, value: Any) -> bool:
        if value is None:
            return False
        if self.is_discrete:
            return value in self.domain
        if not self.domain:
            return False
        lo, hi = self.domain[0], self.domain[-1]
        if hi < lo:
            lo, hi = hi, lo
        try:
            return bool(lo <= value <= hi)
        except TypeError:
            return False

    def clamp_to_domain(self, value: Any) -> Any:
        """
        Clamp a value into the domain.

        Discrete: the value itself if it is a member, else None. Continuous: the value
        clamped to ``[domain[0], domain[1]]``.
        """
        if self.is_discrete:
            return value if value in self.domain else None
        if value is None or not self.domain:
            return value
        if value < self.domain[0]:
            return self.domain[0]
        if value > self.domain[-1]:
            return self.domain[-1]
        return value
