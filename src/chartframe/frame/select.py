"""
Frame concept selection and splash pre-loading.

- select_frame_concept: pick the dimension to animate over when a chart does not name
  one (a time concept, else a measure, else the last space dimension).
- splash_filter: the data filter that loads only the configured frame ahead of the full
  dataset.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from chartframe.data.concepts import ConceptDescriptor, ConceptType

__all__ = ["select_frame_concept", "splash_filter"]

logger = logging.getLogger(__name__)


def _time_or_measure(concepts: Sequence[ConceptDescriptor]) -> ConceptDescriptor | None:
    for wanted in (ConceptType.TIME, ConceptType.MEASURE):
        for c in concepts:
            if c.concept_type is wanted:
                return c
    return None


def select_frame_concept(
    space: Sequence[ConceptDescriptor],
    concepts: Sequence[ConceptDescriptor] = (),
) -> ConceptDescriptor | None:
    """
    Choose the frame concept.

    Space dimensions are searched first, then all available concepts; the last space
    dimension is the fallback.

    Examples:
        >>> from chartframe.data.concepts import ConceptDescriptor as C
        >>> space = [C(concept="geo", concept_type="entity_domain"),
        ...          C(concept="time", concept_type="time")]
        >>> select_frame_concept(space).concept
        'time'
    """
    found = _time_or_measure(space) or _time_or_measure(concepts)
    if found is not None:
        return found
    return space[-1] if space else None


def splash_filter(concept: Any, value: Any) -> dict[str, dict[str, Any]] | None:
    """
    Dimension filter restricting a query to the configured frame value.

    Args:
        concept: Frame concept; must be a plain column name.
        value: Configured frame value (config form).

    Returns:
        ``{concept: {concept: value}}``, or None (with a warning) when the concept is not
        a plain name, e.g. still awaiting automatic selection.
    """
    if not isinstance(concept, str) or not concept:
        logger.warning(
            "Frame splash needs an explicit frame concept; set the frame concept or "
            "disable splash."
        )
        return None
    return {concept: {concept: value}}
