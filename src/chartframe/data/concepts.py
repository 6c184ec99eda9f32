"""
Concept descriptors and data availability states.

A concept is the semantic metadata attached to a data column (e.g. ``year`` is a time
concept, ``geo`` an entity domain, ``pop`` a measure). Descriptors are supplied by the
data source and are read-only to the scale and frame engines.

Responsibilities
- ConceptType: enum of the concept kinds the engines act on (lower_snake values); the
  set is open, other kinds pass through as strings.
- ConceptDescriptor: pydantic model with a normalized preferred-scales list.
- DataState and combine_states: availability of upstream data (pending/fulfilled/failed).
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "ConceptType",
    "DISCRETE_CONCEPT_TYPES",
    "ConceptDescriptor",
    "DataState",
    "combine_states",
]


class ConceptType(str, Enum):
    """Semantic kind of a data column."""

    TIME = "time"
    MEASURE = "measure"
    ENTITY_DOMAIN = "entity_domain"
    ENTITY_SET = "entity_set"
    STRING = "string"
    BOOLEAN = "boolean"
    INTERVAL = "interval"


# Concept kinds whose values are categories rather than magnitudes.
DISCRETE_CONCEPT_TYPES: frozenset[ConceptType] = frozenset(
    {ConceptType.ENTITY_DOMAIN, ConceptType.ENTITY_SET, ConceptType.STRING}
)


class ConceptDescriptor(BaseModel):
    """
    Semantic metadata about one data column.

    Attributes:
        concept (str): Column/concept identifier.
        concept_type (ConceptType | str): Semantic kind; kinds outside ConceptType are kept
            as plain strings and treated as continuous.
        scales (list[str] | None): Preferred scale types, most preferred first. Accepts
            a list or a JSON-encoded list string (as served by concept metadata tables).
        name (str | None): Human-readable label.

    Examples:
        >>> from chartframe.data.concepts import ConceptDescriptor
        >>> c = ConceptDescriptor(concept="pop", concept_type="measure", scales='["log", "linear"]')
        >>> c.scales
        ['log', 'linear']
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    concept: str
    concept_type: ConceptType | str = Field(union_mode="left_to_right")
    scales: list[str] | None = None
    name: str | None = None

    @field_validator("concept_type", mode="before")
    @classmethod
    def _lower_concept_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("scales", mode="before")
    @classmethod
    def _parse_scales(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError:
                # single bare scale name
                return [v.strip()]
            return [parsed] if isinstance(parsed, str) else parsed
        return v

    @property
    def is_discrete(self) -> bool:
        return self.concept_type in DISCRETE_CONCEPT_TYPES

    @property
    def is_time(self) -> bool:
        return self.concept_type is ConceptType.TIME


class DataState(str, Enum):
    """Availability of upstream data."""

    PENDING = "pending"
    FULFILLED = "fulfilled"
    FAILED = "failed"


def combine_states(states: Iterable[DataState | str]) -> DataState:
    """
    Combine several availability states into one.

    Any failed state wins, then any pending state; only all-fulfilled is fulfilled.

    Examples:
        >>> combine_states(["fulfilled", "pending"])
        <DataState.PENDING: 'pending'>
    """
    normalized = [DataState(s) for s in states]
    if DataState.FAILED in normalized:
        return DataState.FAILED
    if DataState.PENDING in normalized:
        return DataState.PENDING
    return DataState.FULFILLED
