from __future__ import annotations

from datetime import date, datetime

import pytest

from chartframe.core.errors import ConfigParseError
from chartframe.data.concepts import ConceptDescriptor
from chartframe.data.values import (
    format_config_value,
    inclusive_range,
    infer_time_interval,
    parse_config_value,
    to_number,
)

YEAR = ConceptDescriptor(concept="year", concept_type="time")
POP = ConceptDescriptor(concept="pop", concept_type="measure")
GEO = ConceptDescriptor(concept="geo", concept_type="entity_domain")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2001", datetime(2001, 1, 1)),
        (2001, datetime(2001, 1, 1)),
        ("2001-03", datetime(2001, 3, 1)),
        ("2001-03-14", datetime(2001, 3, 14)),
        ("20010314", datetime(2001, 3, 14)),
        (date(2001, 3, 14), datetime(2001, 3, 14)),
        ("2001-03-14T12:30:00", datetime(2001, 3, 14, 12, 30)),
    ],
)
def test_parse_time_values(raw, expected) -> None:
    assert parse_config_value(raw, YEAR) == expected


def test_parse_failures_raise_config_parse_error() -> None:
    with pytest.raises(ConfigParseError):
        parse_config_value("soon", YEAR)
    with pytest.raises(ConfigParseError):
        parse_config_value(0, YEAR)
    with pytest.raises(ConfigParseError):
        parse_config_value("many", POP)


def test_parse_leaves_other_concepts_and_missing_values_alone() -> None:
    assert parse_config_value("swe", GEO) == "swe"
    assert parse_config_value("12.5", POP) == 12.5
    assert parse_config_value(None, YEAR) is None
    assert parse_config_value("2001", None) == "2001"


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime(2000, 1, 1), "2000"),
        (datetime(2000, 3, 1), "2000-03"),
        (datetime(2000, 3, 14), "2000-03-14"),
        (datetime(2000, 3, 14, 6), "2000-03-14T06:00:00"),
        (date(2000, 1, 1), "2000"),
        (12.5, 12.5),
    ],
)
def test_format_config_value(value, expected) -> None:
    assert format_config_value(value, YEAR) == expected


def test_format_then_parse_keeps_fractional_datetimes() -> None:
    value = datetime(2000, 7, 2, 12)
    assert parse_config_value(format_config_value(value, YEAR), YEAR) == value


def test_infer_time_interval() -> None:
    assert infer_time_interval([datetime(2000, 1, 1), datetime(2003, 1, 1)]) == "1y"
    assert infer_time_interval([datetime(2000, 1, 1), datetime(2000, 5, 1)]) == "1mo"
    assert infer_time_interval([datetime(2000, 1, 1), datetime(2000, 1, 9)]) == "1d"
    assert infer_time_interval([datetime(2000, 1, 1, 3)]) is None
    assert infer_time_interval([]) is None


def test_inclusive_range_by_granularity() -> None:
    assert inclusive_range(2000, 2003) == [2000, 2001, 2002, 2003]
    assert inclusive_range(datetime(2000, 1, 1), datetime(2002, 1, 1), YEAR) == [
        datetime(2000, 1, 1),
        datetime(2001, 1, 1),
        datetime(2002, 1, 1),
    ]
    assert inclusive_range(datetime(2000, 1, 1), datetime(2000, 3, 1)) == [
        datetime(2000, 1, 1),
        datetime(2000, 2, 1),
        datetime(2000, 3, 1),
    ]
    assert inclusive_range(date(2000, 1, 30), date(2000, 2, 1)) == [
        date(2000, 1, 30),
        date(2000, 1, 31),
        date(2000, 2, 1),
    ]


def test_inclusive_range_without_regular_index() -> None:
    assert inclusive_range(0.5, 2.5) is None
    assert inclusive_range("a", "c") is None
    assert inclusive_range(None, 3) is None


def test_to_number_projects_datetimes_to_epoch_seconds() -> None:
    assert to_number(datetime(1970, 1, 2)) == 86400.0
    assert to_number(3) == 3.0
