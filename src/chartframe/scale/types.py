"""
Scale kinds and the ordered inference rule table.

Responsibilities
- ScaleType: supported scale kinds (lower_snake values).
- scale_type_from_value: tolerant normalization of config names (``"genericLog"``,
  ``"LOG"``); unsupported names resolve to None so inference falls through.
- INFERENCE_RULES: ordered (name, rule) pairs; the first rule returning a type wins.
- is_one_sided: zero-crossing test shared by log substitution and zero-baseline.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from chartframe.data.concepts import ConceptDescriptor, ConceptType
from chartframe.data.values import is_number

__all__ = [
    "ScaleType",
    "DISCRETE_TYPES",
    "scale_type_from_value",
    "InferenceInput",
    "INFERENCE_RULES",
    "infer_scale_type",
    "is_one_sided",
]


class ScaleType(str, Enum):
    LINEAR = "linear"
    LOG = "log"
    GENERIC_LOG = "generic_log"
    SQRT = "sqrt"
    ORDINAL = "ordinal"
    POINT = "point"
    BAND = "band"
    TIME = "time"


DISCRETE_TYPES: frozenset[ScaleType] = frozenset(
    {ScaleType.ORDINAL, ScaleType.POINT, ScaleType.BAND}
)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")
_ALIASES: dict[str, ScaleType] = {"symlog": ScaleType.GENERIC_LOG, "utc": ScaleType.TIME}


def scale_type_from_value(value: Any) -> ScaleType | None:
    """
    Normalize a configured scale name; return None for absent or unsupported names.

    Examples:
        >>> scale_type_from_value("genericLog")
        <ScaleType.GENERIC_LOG: 'generic_log'>
        >>> scale_type_from_value("pie") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, ScaleType):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    name = value.strip()
    if not name.isupper():
        name = _CAMEL_RE.sub("_", name)
    name = name.lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return ScaleType(name)
    except ValueError:
        return None


def is_one_sided(values: Sequence[Any] | None) -> bool:
    """
    True when all values lie on one side of zero.

    An absent array is not one-sided; an array of length < 2 is. Non-numeric arrays
    (dates, categories) are treated as one-sided since they cannot cross zero.

    Examples:
        >>> is_one_sided([-1, 5])
        False
        >>> is_one_sided([2, 5])
        True
        >>> is_one_sided([0, 5])
        False
    """
    if values is None:
        return False
    if len(values) < 2:
        return True
    nums = [v for v in values if is_number(v)]
    if len(nums) != len(values):
        return True
    return not (min(nums) <= 0 and max(nums) >= 0)


@dataclass(frozen=True)
class InferenceInput:
    """Inputs visible to inference rules."""

    configured: Any
    default_type: ScaleType | None
    concept: ConceptDescriptor | None
    ordinal_default: ScaleType


Rule = Callable[[InferenceInput], ScaleType | None]


def _configured(inp: InferenceInput) -> ScaleType | None:
    configured = scale_type_from_value(inp.configured)
    if configured is not None:
        return configured
    # class defaults (size: sqrt) never apply to categories
    if inp.concept is not None and inp.concept.is_discrete:
        return None
    return inp.default_type


def _concept_preference(inp: InferenceInput) -> ScaleType | None:
    if inp.concept is None or not inp.concept.scales:
        return None
    return scale_type_from_value(inp.concept.scales[0])


def _discrete_concept(inp: InferenceInput) -> ScaleType | None:
    if inp.concept is not None and inp.concept.is_discrete:
        return inp.ordinal_default
    return None


def _time_concept(inp: InferenceInput) -> ScaleType | None:
    if inp.concept is not None and inp.concept.concept_type is ConceptType.TIME:
        return ScaleType.TIME
    return None


def _fallback(inp: InferenceInput) -> ScaleType | None:
    return ScaleType.LINEAR


INFERENCE_RULES: tuple[tuple[str, Rule], ...] = (
    ("configured", _configured),
    ("concept_preference", _concept_preference),
    ("discrete_concept", _discrete_concept),
    ("time_concept", _time_concept),
    ("fallback", _fallback),
)


def infer_scale_type(inp: InferenceInput) -> tuple[ScaleType, str]:
    """Run the rule table; return the chosen type and the name of the rule that chose it."""
    for name, rule in INFERENCE_RULES:
        chosen = rule(inp)
        if chosen is not None:
            return chosen, name
    raise AssertionError("fallback rule must always choose a type")  # pragma: no cover
