"""Record-store contract and facet specifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from pyfide.models.player import PlayerRecord
from pyfide.query.predicates import MATCH_ALL, Filter
from pyfide.query.ranking import SortSpec


@dataclass(frozen=True)
class Count:
    pass


@dataclass(frozen=True)
class Mean:
    """Mean of a numeric field over rows where it is non-zero."""

    field: str


@dataclass(frozen=True)
class CountIf:
    where: Filter


Accumulator = Union[Count, Mean, CountIf]


@dataclass(frozen=True)
class AgeBuckets:
    """Group rows by statistics age bucket, derived from ``birth_year``."""

    reference_year: int


@dataclass(frozen=True)
class FacetSpec:
    name: str
    where: Filter = MATCH_ALL
    unwind: Optional[str] = None
    group_by: Union[str, AgeBuckets, None] = None
    accumulators: Tuple[Tuple[str, Accumulator], ...] = (("count", Count()),)
    sort_by: Optional[str] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class FacetRow:
    key: Any
    values: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)


FacetResults = Dict[str, List[FacetRow]]


@runtime_checkable
class RecordStore(Protocol):
    """Read-only access to the player population."""

    def find_one(self, criteria: Filter) -> Optional[PlayerRecord]:
        ...

    def find_many(
        self,
        criteria: Filter,
        sort: SortSpec = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[PlayerRecord]:
        ...

    def count(self, criteria: Filter) -> int:
        ...

    def aggregate_facets(self, specs: Sequence[FacetSpec]) -> FacetResults:
        ...


__all__ = [
    "Accumulator",
    "AgeBuckets",
    "Count",
    "CountIf",
    "FacetResults",
    "FacetRow",
    "FacetSpec",
    "Mean",
    "RecordStore",
]
