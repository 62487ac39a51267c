"""
Record queries: typed filters, query options and the in-memory engine.
"""

from .engine import QueryEngine, record_matches, sort_records
from .types import (
    ExactEqual,
    FieldTest,
    Filter,
    PatternMatch,
    QueryOptions,
    Unsatisfiable,
    coerce_filter,
    coerce_options,
)

__all__ = [
    "QueryEngine",
    "record_matches",
    "sort_records",
    "ExactEqual",
    "FieldTest",
    "Filter",
    "PatternMatch",
    "QueryOptions",
    "Unsatisfiable",
    "coerce_filter",
    "coerce_options",
]
