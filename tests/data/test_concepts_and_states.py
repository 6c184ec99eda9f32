from __future__ import annotations

import pytest
from pydantic import ValidationError

from chartframe.data.concepts import ConceptDescriptor, ConceptType, DataState, combine_states


def test_concept_descriptor_parses_scales_from_json_or_list() -> None:
    assert ConceptDescriptor(concept="pop", concept_type="measure", scales='["log"]').scales == [
        "log"
    ]
    assert ConceptDescriptor(concept="pop", concept_type="measure", scales=["sqrt"]).scales == [
        "sqrt"
    ]
    assert ConceptDescriptor(concept="pop", concept_type="measure", scales="linear").scales == [
        "linear"
    ]
    assert ConceptDescriptor(concept="pop", concept_type="measure", scales="").scales is None


def test_concept_descriptor_kinds() -> None:
    geo = ConceptDescriptor(concept="geo", concept_type="ENTITY_DOMAIN")
    year = ConceptDescriptor(concept="year", concept_type="time")

    assert geo.concept_type is ConceptType.ENTITY_DOMAIN
    assert geo.is_discrete and not geo.is_time
    assert year.is_time and not year.is_discrete


def test_concept_descriptor_keeps_unlisted_kinds() -> None:
    role = ConceptDescriptor(concept="role", concept_type="Role")

    assert role.concept_type == "role"
    assert not isinstance(role.concept_type, ConceptType)
    assert not role.is_discrete and not role.is_time


def test_concept_descriptor_forbids_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        ConceptDescriptor(concept="pop", concept_type="measure", unit="people")


@pytest.mark.parametrize(
    "states, expected",
    [
        (["fulfilled", "fulfilled"], DataState.FULFILLED),
        (["fulfilled", "pending"], DataState.PENDING),
        (["pending", "failed"], DataState.FAILED),
        ([], DataState.FULFILLED),
    ],
)
def test_combine_states(states, expected) -> None:
    assert combine_states(states) is expected
