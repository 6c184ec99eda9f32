from __future__ import annotations

from datetime import datetime

import polars as pl

from chartframe.data.concepts import ConceptDescriptor, DataState
from chartframe.data.source import DataSource, PolarsDataSource

CONCEPTS = {
    "geo": ConceptDescriptor(concept="geo", concept_type="entity_domain"),
    "year": ConceptDescriptor(concept="year", concept_type="time"),
    "pop": ConceptDescriptor(concept="pop", concept_type="measure"),
}


def _df() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "geo": ["swe", "nor", "swe", "nor"],
            "year": [2001, 2000, 2000, 2001],
            "pop": [8.9, 4.5, 8.8, None],
        }
    )


def test_polars_source_satisfies_protocol() -> None:
    src = PolarsDataSource(_df(), concept="pop", space=["geo", "year"], concepts=CONCEPTS)
    assert isinstance(src, DataSource)


def test_integer_years_become_datetimes() -> None:
    src = PolarsDataSource(_df(), concept="year", space=["geo", "year"], concepts=CONCEPTS)

    assert src.frame.schema["year"] == pl.Datetime("us")
    assert src.domain == [datetime(2000, 1, 1), datetime(2001, 1, 1)]


def test_domain_for_measure_and_discrete_concepts() -> None:
    pop = PolarsDataSource(_df(), concept="pop", concepts=CONCEPTS)
    geo = PolarsDataSource(_df(), concept="geo", concepts=CONCEPTS)

    assert pop.domain == [4.5, 8.9]
    assert geo.domain == ["swe", "nor"]  # order of appearance


def test_domain_is_none_when_column_missing_or_empty() -> None:
    src = PolarsDataSource(_df(), concept="gdp", concepts=CONCEPTS)
    empty = PolarsDataSource(pl.DataFrame({"pop": []}, schema={"pop": pl.Float64}), concept="pop")

    assert src.domain is None
    assert empty.domain is None


def test_constant_source() -> None:
    src = PolarsDataSource.constant("#ff0000")

    assert src.is_constant()
    assert src.domain == ["#ff0000"]
    assert src.concept_props is None


def test_domain_data_groups_in_ascending_order() -> None:
    src = PolarsDataSource(_df(), concept="year", space=["geo", "year"], concepts=CONCEPTS)

    groups = src.domain_data

    assert [v for v, _ in groups] == [datetime(2000, 1, 1), datetime(2001, 1, 1)]
    assert groups[0][1].get_column("geo").to_list() == ["nor", "swe"]


def test_parse_and_format_follow_concept() -> None:
    src = PolarsDataSource(_df(), concept="year", concepts=CONCEPTS)

    assert src.parse_value("2001") == datetime(2001, 1, 1)
    assert src.format_value(datetime(2001, 1, 1)) == "2001"


def test_replace_data_and_set_state_bump_version() -> None:
    src = PolarsDataSource(_df(), concept="pop", concepts=CONCEPTS, state="pending")
    assert src.state is DataState.PENDING
    v0 = src.version

    src.replace_data(_df().with_columns(pl.col("pop") * 2))
    src.set_state(DataState.FULFILLED)

    assert src.version == v0 + 2
    assert src.state is DataState.FULFILLED
    assert src.domain == [9.0, 17.8]
