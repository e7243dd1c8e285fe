"""Sort specifications and positional rank assignment for paged results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from pyfide.classify.age import derive_age
from pyfide.config.disciplines import Discipline
from pyfide.models.player import PlayerRecord
from pyfide.models.reports import AgedRankedPlayer, RankedPlayer

from .pagination import PageRequest


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = True


SortSpec = Tuple[SortKey, ...]

NAME_SORT: SortSpec = (SortKey("name", descending=False), SortKey("id", descending=False))


def ranking_sort(discipline: Discipline) -> SortSpec:
    """Rating descending; ties fall back to ascending id so pages are stable."""

    return (SortKey(discipline.rating_field, descending=True), SortKey("id", descending=False))


def assign_ranks(records: Sequence[PlayerRecord], request: PageRequest) -> List[RankedPlayer]:
    """Number an already-sorted page: ``rank = page * size + index + 1``."""

    offset = request.rank_offset()
    return [
        RankedPlayer.model_validate({**record.model_dump(), "rank": offset + index})
        for index, record in enumerate(records, start=1)
    ]


def assign_ranks_with_age(
    records: Sequence[PlayerRecord],
    request: PageRequest,
    current_year: int,
) -> List[AgedRankedPlayer]:
    offset = request.rank_offset()
    return [
        AgedRankedPlayer.model_validate(
            {
                **record.model_dump(),
                "rank": offset + index,
                "age": derive_age(record.birth_year, current_year),
            }
        )
        for index, record in enumerate(records, start=1)
    ]


__all__ = [
    "NAME_SORT",
    "SortKey",
    "SortSpec",
    "assign_ranks",
    "assign_ranks_with_age",
    "ranking_sort",
]
