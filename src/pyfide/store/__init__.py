"""Record-store contract and its implementations."""

from .base import AgeBuckets, Count, CountIf, FacetResults, FacetRow, FacetSpec, Mean, RecordStore
from .facets import run_facet, sort_records
from .memory import InMemoryPlayerStore
from .sqlite import SqlitePlayerStore

__all__ = [
    "AgeBuckets",
    "Count",
    "CountIf",
    "FacetResults",
    "FacetRow",
    "FacetSpec",
    "InMemoryPlayerStore",
    "Mean",
    "RecordStore",
    "SqlitePlayerStore",
    "run_facet",
    "sort_records",
]
