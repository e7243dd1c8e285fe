"""In-process record store backed by a tuple of records."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from pyfide.models.player import PlayerRecord
from pyfide.query.predicates import Filter, matches
from pyfide.query.ranking import SortSpec

from .base import FacetResults, FacetSpec
from .facets import run_facet, sort_records


class InMemoryPlayerStore:
    """Evaluates filters in Python over an immutable snapshot."""

    def __init__(self, records: Iterable[PlayerRecord] = ()):
        snapshot = tuple(records)
        ids = [record.id for record in snapshot]
        if len(ids) != len(set(ids)):
            raise ValueError("player ids must be unique")
        self._records = snapshot

    def __len__(self) -> int:
        return len(self._records)

    def _select(self, criteria: Filter) -> List[PlayerRecord]:
        return [record for record in self._records if matches(record, criteria)]

    def find_one(self, criteria: Filter) -> Optional[PlayerRecord]:
        for record in self._records:
            if matches(record, criteria):
                return record
        return None

    def find_many(
        self,
        criteria: Filter,
        sort: SortSpec = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[PlayerRecord]:
        selected = sort_records(self._select(criteria), sort)
        end = None if limit is None else skip + limit
        return selected[skip:end]

    def count(self, criteria: Filter) -> int:
        return len(self._select(criteria))

    def aggregate_facets(self, specs: Sequence[FacetSpec]) -> FacetResults:
        return {spec.name: run_facet(self._records, spec) for spec in specs}
