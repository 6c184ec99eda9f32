from __future__ import annotations

import logging
from datetime import datetime

import polars as pl
import pytest

from chartframe.core.config import EngineSettings
from chartframe.core.constants import CATEGORY10
from chartframe.core.errors import ScaleTypeError
from chartframe.data.concepts import ConceptDescriptor
from chartframe.data.source import PolarsDataSource
from chartframe.scale.resolver import ScaleResolver, SizeScaleResolver, resolve_scale
from chartframe.scale.types import ScaleType

MEASURE = {"v": ConceptDescriptor(concept="v", concept_type="measure")}


def _measure(values: list[float]) -> PolarsDataSource:
    return PolarsDataSource(pl.DataFrame({"v": values}), concept="v", concepts=MEASURE)


def _geo() -> PolarsDataSource:
    return PolarsDataSource(
        pl.DataFrame({"geo": ["swe", "nor", "fin", "nor"]}),
        concept="geo",
        concepts={"geo": ConceptDescriptor(concept="geo", concept_type="entity_domain")},
    )


@pytest.mark.parametrize("lo, hi", [(-2.0, 8.0), (-100.0, 0.5), (-1e-3, 1e6)])
def test_log_over_zero_crossing_domain_becomes_generic_log(lo: float, hi: float) -> None:
    resolver = ScaleResolver({"type": "log"}, _measure([lo, hi]))
    assert resolver.type is ScaleType.GENERIC_LOG


def test_log_over_one_sided_domain_stays_log() -> None:
    assert ScaleResolver({"type": "log"}, _measure([1.0, 1000.0])).type is ScaleType.LOG
    assert ScaleResolver({"type": "log"}, _measure([-1000.0, -1.0])).type is ScaleType.LOG


@pytest.mark.parametrize(
    "values, expected",
    [([2.0, 8.0], [0, 8.0]), ([-8.0, -2.0], [-8.0, 0]), ([5.0, 5.0], [0, 5.0])],
)
def test_zero_baseline_replaces_value_closest_to_zero(values, expected) -> None:
    # Act
    domain = ScaleResolver({"zeroBaseline": True}, _measure(values)).domain

    # Assert: exactly one zero, length unchanged
    assert domain == expected
    assert domain.count(0) == 1
    assert len(domain) == len(values)


def test_zero_baseline_ignored_for_zero_crossing_domain() -> None:
    assert ScaleResolver({"zeroBaseline": True}, _measure([-2.0, 8.0])).domain == [-2.0, 8.0]


def test_disallowed_type_resolves_to_none_with_warning(caplog) -> None:
    # Arrange
    resolver = ScaleResolver({"type": "log", "allowedTypes": ["linear"]}, _measure([1.0, 10.0]))

    # Act
    with caplog.at_level(logging.WARNING, logger="chartframe.scale.resolver"):
        resolved = resolver.resolved

    # Assert
    assert resolved.type is None
    assert resolved.misconfigured
    assert len(resolved.issues) == 1
    assert "not in allowed types" in resolved.issues[0]
    assert any("not in allowed types" in r.getMessage() for r in caplog.records)


def test_disallowed_type_raises_under_strict_settings() -> None:
    resolver = ScaleResolver(
        {"type": "log", "allowedTypes": ["linear"]},
        _measure([1.0, 10.0]),
        settings=EngineSettings(strict_scale_types=True),
    )
    with pytest.raises(ScaleTypeError):
        _ = resolver.type


def test_allowed_types_accept_config_spelling() -> None:
    resolver = ScaleResolver(
        {"type": "log", "allowedTypes": ["genericLog", "linear"]}, _measure([-1.0, 10.0])
    )
    assert resolver.type is ScaleType.GENERIC_LOG
    assert resolver.issues == ()


def test_discrete_concept_defaults() -> None:
    resolver = ScaleResolver(None, _geo())

    assert resolver.type is ScaleType.ORDINAL
    assert resolver.is_discrete()
    assert resolver.domain == ["swe", "nor", "fin"]
    assert resolver.range == list(CATEGORY10)


def test_ordinal_default_follows_settings() -> None:
    resolver = ScaleResolver(None, _geo(), settings=EngineSettings(ordinal_scale="band"))
    assert resolver.type is ScaleType.BAND


def test_constant_data_maps_onto_itself() -> None:
    resolver = ScaleResolver({"type": "linear"}, PolarsDataSource.constant("#ff0000"))

    assert resolver.type is ScaleType.ORDINAL
    assert resolver.domain == ["#ff0000"]
    assert resolver.range == ["#ff0000"]


def test_time_concept_resolves_time_scale_with_parsed_config_domain() -> None:
    src = PolarsDataSource(
        pl.DataFrame({"year": [2000, 2010]}),
        concept="year",
        concepts={"year": ConceptDescriptor(concept="year", concept_type="time")},
    )

    resolver = ScaleResolver({"domain": ["2002", "2008"]}, src)

    assert resolver.type is ScaleType.TIME
    assert resolver.domain == [datetime(2002, 1, 1), datetime(2008, 1, 1)]
    assert resolver.zoomed == resolver.domain


def test_missing_domain_falls_back_to_defaults() -> None:
    empty = PolarsDataSource(pl.DataFrame({"v": []}, schema={"v": pl.Float64}), concept="v")
    empty_geo = PolarsDataSource(
        pl.DataFrame({"geo": []}, schema={"geo": pl.String}),
        concept="geo",
        concepts={"geo": ConceptDescriptor(concept="geo", concept_type="entity_domain")},
    )

    assert ScaleResolver(None, empty).domain == [0.0, 1.0]
    assert ScaleResolver(None, empty_geo).domain == []


def test_config_range_and_zoomed_win() -> None:
    resolver = ScaleResolver({"range": [10, 20], "zoomed": [2, 3]}, _measure([1.0, 5.0]))

    assert resolver.range == [10, 20]
    assert resolver.zoomed == [2, 3]


def test_size_scale_defaults() -> None:
    size = SizeScaleResolver(None, _measure([1.0, 100.0]))
    size_geo = SizeScaleResolver(None, _geo())

    assert size.type is ScaleType.SQRT
    assert size.range == [0.0, 20.0]
    assert size_geo.type is ScaleType.POINT
    assert size_geo.range == [1.0, 20.0]
    assert size_geo.is_discrete()
    assert [size_geo.mapping(g) for g in ("swe", "nor", "fin")] == [1.0, 10.5, 20.0]


def test_resolution_recomputes_when_config_or_data_change() -> None:
    # Arrange
    src = _measure([1.0, 10.0])
    resolver = ScaleResolver({"type": "log"}, src)
    assert resolver.type is ScaleType.LOG

    # Act: data now crosses zero
    src.replace_data(pl.DataFrame({"v": [-1.0, 10.0]}))

    # Assert
    assert resolver.type is ScaleType.GENERIC_LOG

    # Act: config mutation through the resolver
    resolver.set_domain([2.0, 4.0])
    assert resolver.domain == [2.0, 4.0]
    assert resolver.type is ScaleType.LOG
    resolver.set_range([0, 500])
    assert resolver.resolved.range == [0, 500]


def test_clamp_to_domain_is_idempotent_for_continuous() -> None:
    resolver = ScaleResolver(None, _measure([0.0, 10.0]))
    for x in (-5.0, 0.0, 3.3, 10.0, 42.0):
        once = resolver.clamp_to_domain(x)
        assert resolver.clamp_to_domain(once) == once
        assert 0.0 <= once <= 10.0


def test_clamp_to_domain_discrete_members_only() -> None:
    resolver = ScaleResolver(None, _geo())

    assert resolver.clamp_to_domain("nor") == "nor"
    assert resolver.clamp_to_domain("dnk") is None
    assert resolver.clamp_to_domain(resolver.clamp_to_domain("dnk")) is None
    assert resolver.domain_includes("fin")
    assert not resolver.domain_includes("dnk")


def test_resolve_scale_one_shot_mapping() -> None:
    resolved = resolve_scale({"range": [0, 100]}, _measure([0.0, 10.0]))

    assert resolved.type is ScaleType.LINEAR
    assert resolved.mapping()(2.5) == 25.0


def test_unlisted_concept_kind_resolves_as_linear() -> None:
    src = PolarsDataSource(
        pl.DataFrame({"rank": [3.0, 1.0, 2.0]}),
        concept="rank",
        concepts={"rank": ConceptDescriptor(concept="rank", concept_type="role")},
    )

    resolver = ScaleResolver(None, src)

    assert resolver.type is ScaleType.LINEAR
    assert resolver.domain == [1.0, 3.0]
