"""
chartframe.data: concept metadata, value parsing and the data-source contract.

## Responsibilities
- Describe columns semantically (ConceptDescriptor, ConceptType) and track data
  availability (DataState, combine_states).
- Convert between config-form values and in-memory values per concept type.
- Define the DataSource protocol the engines read, with a Polars-backed implementation.

## Examples
```python
import polars as pl
from chartframe.data import ConceptDescriptor, PolarsDataSource
src = PolarsDataSource(
    pl.DataFrame({"geo": ["swe", "nor"], "year": [2000, 2000], "pop": [8.8, 4.5]}),
    concept="pop",
    space=["geo", "year"],
    concepts={"year": ConceptDescriptor(concept="year", concept_type="time")},
)
src.domain  # [4.5, 8.8]
```
"""

from __future__ import annotations

from .concepts import ConceptDescriptor, ConceptType, DataState, combine_states
from .source import DataSource, PolarsDataSource
from .values import format_config_value, inclusive_range, parse_config_value

__all__ = [
    "ConceptDescriptor",
    "ConceptType",
    "DataState",
    "combine_states",
    "DataSource",
    "PolarsDataSource",
    "parse_config_value",
    "format_config_value",
    "inclusive_range",
]
