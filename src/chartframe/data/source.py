"""
Data-source contract consumed by the scale and frame engines, plus a Polars-backed source.

Responsibilities
- DataSource: the narrow protocol the engines read (observed domain, constancy,
  concept metadata, frame-value groups, availability state and a version counter).
- PolarsDataSource: concrete source over an in-memory ``pl.DataFrame``.

Notes
- Sources never drive the engines; engines read them and cache derived values against
  ``version``. Every mutation (new rows, new state) bumps the version.
- Time concepts stored as integer years are normalized to datetimes on load so frame
  values, config values and domains share one representation.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import polars as pl

from .concepts import ConceptDescriptor, DataState
from .values import format_config_value, parse_config_value

__all__ = [
    "DataSource",
    "PolarsDataSource",
    "normalize_time_columns",
]

_MISSING = object()


@runtime_checkable
class DataSource(Protocol):
    """Read-only view of one encoding's data as seen by the engines."""

    @property
    def concept(self) -> str | None: ...

    @property
    def space(self) -> tuple[str, ...]: ...

    @property
    def concept_props(self) -> ConceptDescriptor | None: ...

    @property
    def domain(self) -> list[Any] | None: ...

    @property
    def domain_data(self) -> list[tuple[Any, pl.DataFrame]]: ...

    @property
    def state(self) -> DataState: ...

    @property
    def version(self) -> int: ...

    @property
    def frame(self) -> pl.DataFrame: ...

    def is_constant(self) -> bool: ...

    def calc_domain(self, df: pl.DataFrame) -> list[Any] | None: ...

    def parse_value(self, value: Any) -> Any: ...

    def format_value(self, value: Any) -> Any: ...


def normalize_time_columns(
    df: pl.DataFrame, concepts: Mapping[str, ConceptDescriptor]
) -> pl.DataFrame:
    """Cast integer-year columns of time concepts to datetimes (Jan 1st of the year)."""
    casts: list[pl.Expr] = []
    for name, desc in concepts.items():
        if not desc.is_time or name not in df.columns:
            continue
        if df.schema[name].is_integer():
            casts.append(pl.datetime(pl.col(name), 1, 1).alias(name))
        elif df.schema[name] == pl.Date:
            casts.append(pl.col(name).cast(pl.Datetime("us")))
    if casts:
        df = df.with_columns(casts)
    return df


class PolarsDataSource:
    """
    DataSource over an in-memory Polars DataFrame.

    Args:
        df (pl.DataFrame): Rows, one per (space key, concept value).
        concept (str | None): Column this source feeds (e.g. the frame concept ``year``).
        space (Sequence[str]): Key dimensions of the rows (e.g. ``["geo", "year"]``).
        concepts (Mapping[str, ConceptDescriptor] | None): Descriptors per column.
        state (DataState): Initial availability state.
        constant (Any): When given, the source represents a constant value instead of a column.

    Examples:
        >>> import polars as pl
        >>> from chartframe.data.source import PolarsDataSource
        >>> src = PolarsDataSource(pl.DataFrame({"geo": ["a", "b"], "pop": [1.0, 3.0]}),
        ...                        concept="pop", space=["geo"])
        >>> src.domain
        [1.0, 3.0]
    """

    def __init__(
        self,
        df: pl.DataFrame,
        *,
        concept: str | None,
        space: Sequence[str] = (),
        concepts: Mapping[str, ConceptDescriptor] | None = None,
        state: DataState | str = DataState.FULFILLED,
        constant: Any = _MISSING,
    ) -> None:
        self._concepts = dict(concepts or {})
        self._df = normalize_time_columns(df, self._concepts)
        self._concept = concept
        self._space = tuple(space)
        self._state = DataState(state)
        self._constant = constant
        self._version = 0

    @classmethod
    def constant(cls, value: Any) -> PolarsDataSource:
        """Source for an encoding bound to a constant value rather than a column."""
        return cls(pl.DataFrame(), concept=None, constant=value)

    # -- contract -------------------------------------------------------

    @property
    def concept(self) -> str | None:
        return self._concept

    @property
    def space(self) -> tuple[str, ...]:
        return self._space

    @property
    def concepts(self) -> dict[str, ConceptDescriptor]:
        return dict(self._concepts)

    @property
    def concept_props(self) -> ConceptDescriptor | None:
        if self._concept is None:
            return None
        return self._concepts.get(self._concept)

    @property
    def frame(self) -> pl.DataFrame:
        return self._df

    @property
    def state(self) -> DataState:
        return self._state

    @property
    def version(self) -> int:
        return self._version

    def is_constant(self) -> bool:
        return self._constant is not _MISSING

    def _is_discrete_column(self, df: pl.DataFrame) -> bool:
        props = self.concept_props
        if props is not None:
            return props.is_discrete
        dtype = df.schema[self._concept]  # type: ignore[index]
        return not (dtype.is_numeric() or dtype.is_temporal())

    def calc_domain(self, df: pl.DataFrame) -> list[Any] | None:
        """
        Observed domain of the concept column in ``df``.

        Returns:
            list | None: Distinct values in order of appearance for discrete concepts,
            ``[min, max]`` otherwise; None when the column is absent or has no values.
        """
        if self._concept is None or self._concept not in df.columns:
            return None
        col = df.get_column(self._concept).drop_nulls()
        if col.len() == 0:
            return None
        if self._is_discrete_column(df):
            return col.unique(maintain_order=True).to_list()
        agg = df.select(
            pl.col(self._concept).min().alias("_lo"), pl.col(self._concept).max().alias("_hi")
        )
        lo, hi = agg.row(0)
        return [lo, hi]

    @property
    def domain(self) -> list[Any] | None:
        if self.is_constant():
            return [self._constant]
        return self.calc_domain(self._df)

    @property
    def domain_data(self) -> list[tuple[Any, pl.DataFrame]]:
        """Rows grouped by concept value, groups in ascending concept order."""
        if self._concept is None or self._concept not in self._df.columns:
            return []
        df = self._df.filter(pl.col(self._concept).is_not_null()).sort(
            self._concept, maintain_order=True
        )
        return [(key[0], group) for key, group in df.group_by(self._concept, maintain_order=True)]

    def parse_value(self, value: Any) -> Any:
        return parse_config_value(value, self.concept_props)

    def format_value(self, value: Any) -> Any:
        return format_config_value(value, self.concept_props)

    # -- mutation ---------------------------------------------------------

    def replace_data(self, df: pl.DataFrame) -> None:
        """Swap in new rows (e.g. after a new query response) and bump the version."""
        self._df = normalize_time_columns(df, self._concepts)
        self._version += 1

    def set_state(self, state: DataState | str) -> None:
        self._state = DataState(state)
        self._version += 1
