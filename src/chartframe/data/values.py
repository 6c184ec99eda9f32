"""
Concept-aware value parsing, formatting and ranges.

Config objects store frame values and domains in their plain, serializable form
(``"2000"`` for a year). These helpers convert between that form and the in-memory
values the engines compare against (``datetime(2000, 1, 1)``), keyed by concept type.

Notes
- Time concepts are represented as naive datetimes interpreted as UTC.
- Parse failures raise ConfigParseError; they are never swallowed.
- inclusive_range builds the full frame index used to reindex grouped data; it is
  Polars-backed (int_range / datetime_range).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from numbers import Real
from typing import Any

import polars as pl

from chartframe.core.errors import ConfigParseError

from .concepts import ConceptDescriptor, ConceptType

__all__ = [
    "EPOCH",
    "is_number",
    "is_temporal",
    "to_number",
    "parse_config_value",
    "format_config_value",
    "infer_time_interval",
    "inclusive_range",
]

EPOCH = datetime(1970, 1, 1)

_TIME_FORMATS: tuple[str, ...] = ("%Y", "%Y-%m", "%Y-%m-%d", "%Y%m%d")


def is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def is_temporal(value: Any) -> bool:
    return isinstance(value, (datetime, date))


def to_number(value: Any) -> float:
    """Project numbers and datetimes onto a float axis (datetimes as epoch seconds)."""
    if isinstance(value, datetime):
        return (value - EPOCH).total_seconds()
    if isinstance(value, date):
        return (datetime(value.year, value.month, value.day) - EPOCH).total_seconds()
    return float(value)


def _parse_time(value: Any, concept: ConceptDescriptor) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if is_number(value) and float(value).is_integer():
        try:
            return datetime(int(value), 1, 1)
        except ValueError as exc:
            raise ConfigParseError(
                f"year {value!r} out of range for concept {concept.concept!r}"
            ) from exc
    if isinstance(value, str):
        text = value.strip()
        for fmt in _TIME_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            pass
        else:
            return parsed.replace(tzinfo=None) if parsed.tzinfo is not None else parsed
    raise ConfigParseError(
        f"cannot parse {value!r} as a time value for concept {concept.concept!r}"
    )


def parse_config_value(value: Any, concept: ConceptDescriptor | None) -> Any:
    """
    Parse a plain config value into the value space of a concept.

    Args:
        value (Any): Serialized config value (string, number, datetime, ...).
        concept (ConceptDescriptor | None): Concept of the column; None leaves values as-is.

    Returns:
        Any: Parsed value (datetime for time concepts, float for numeric measure strings).

    Raises:
        ConfigParseError: If a time value cannot be parsed, or a measure string is not numeric.

    Examples:
        >>> from chartframe.data.concepts import ConceptDescriptor
        >>> year = ConceptDescriptor(concept="year", concept_type="time")
        >>> parse_config_value("2001", year)
        datetime.datetime(2001, 1, 1, 0, 0)
    """
    if value is None or concept is None:
        return value
    if concept.concept_type is ConceptType.TIME:
        return _parse_time(value, concept)
    if concept.concept_type is ConceptType.MEASURE and isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ConfigParseError(
                f"cannot parse {value!r} as a number for concept {concept.concept!r}"
            ) from exc
    return value


def format_config_value(value: Any, concept: ConceptDescriptor | None) -> Any:
    """
    Format an in-memory value back into its plain config form.

    Datetimes are written at the coarsest granularity that keeps them exact
    (``"2000"``, ``"2000-03"``, ``"2000-03-14"`` or ISO with time).

    Examples:
        >>> from datetime import datetime
        >>> format_config_value(datetime(2000, 1, 1), None)
        '2000'
    """
    if isinstance(value, datetime):
        if value.hour or value.minute or value.second or value.microsecond:
            return value.isoformat()
        if value.month == 1 and value.day == 1:
            return f"{value.year:04d}"
        if value.day == 1:
            return f"{value.year:04d}-{value.month:02d}"
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
    if isinstance(value, date):
        return format_config_value(datetime(value.year, value.month, value.day), concept)
    return value


def infer_time_interval(values: Iterable[datetime]) -> str | None:
    """Return the polars interval string ("1y", "1mo", "1d") all values align to, if any."""
    vals = list(values)
    if not vals:
        return None
    midnight = all(v.time() == datetime.min.time() for v in vals)
    if not midnight:
        return None
    if all(v.month == 1 and v.day == 1 for v in vals):
        return "1y"
    if all(v.day == 1 for v in vals):
        return "1mo"
    return "1d"


def inclusive_range(
    lo: Any,
    hi: Any,
    concept: ConceptDescriptor | None = None,
    observed: Sequence[Any] | None = None,
) -> list[Any] | None:
    """
    Build every frame value from ``lo`` to ``hi`` inclusive at the concept's granularity.

    Args:
        lo, hi: Domain endpoints.
        concept: Frame concept (informational; granularity comes from the values).
        observed: Observed frame values used to infer datetime granularity.

    Returns:
        list | None: The full index, or None when no regular index exists
        (floats, strings, irregular datetimes). Callers then use the observed values.

    Examples:
        >>> inclusive_range(2000, 2003)
        [2000, 2001, 2002, 2003]
    """
    if lo is None or hi is None:
        return None
    if is_number(lo) and is_number(hi) and isinstance(lo, int) and isinstance(hi, int):
        return pl.int_range(lo, hi + 1, eager=True).to_list()
    if isinstance(lo, datetime) and isinstance(hi, datetime):
        interval = infer_time_interval([lo, hi, *(observed or [])])
        if interval is None:
            return None
        return pl.datetime_range(lo, hi, interval=interval, eager=True).to_list()
    if isinstance(lo, date) and isinstance(hi, date):
        days = (hi - lo).days
        return [lo + timedelta(days=i) for i in range(days + 1)]
    return None
