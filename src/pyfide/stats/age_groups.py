"""Per age-group statistics: gender split, top-10 rosters and age extremes."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pyfide.classify.age import AgeGroupDescriptor, derive_age
from pyfide.config.disciplines import Discipline
from pyfide.models.player import PlayerRecord
from pyfide.models.reports import (
    AgeGroupExtremes,
    AgeGroupStats,
    ExtremePlayer,
    GenderGroups,
    GenderGroupStats,
    RatedGroup,
    RosterEntry,
    UnratedGroup,
)
from pyfide.query.filters import build_age_group_filter
from pyfide.query.ranking import ranking_sort
from pyfide.store.base import RecordStore

from .concurrency import run_facets


logger = logging.getLogger(__name__)

ROSTER_SIZE = 10


def _gender_stats(
    members: Sequence[PlayerRecord],
    gender: str,
    discipline: Discipline,
) -> GenderGroupStats:
    # ``members`` arrive sorted by rating descending.
    of_gender = [record for record in members if record.gender == gender]
    rated = [record for record in of_gender if record.rating(discipline.key) > 0]
    roster = rated[:ROSTER_SIZE]
    average = None
    if roster:
        average = round(sum(record.rating(discipline.key) for record in roster) / len(roster), 2)
    return GenderGroupStats(
        total_count=len(of_gender),
        with_rating=RatedGroup(
            count=len(rated),
            avg_rating_top10=average,
            top10_players=[
                RosterEntry(
                    id=record.id,
                    name=record.name,
                    titles=list(record.titles),
                    rating=record.rating(discipline.key),
                    birth_year=record.birth_year,
                )
                for record in roster
            ],
        ),
        without_rating=UnratedGroup(count=len(of_gender) - len(rated)),
    )


def _extreme(record: Optional[PlayerRecord], discipline: Discipline, current_year: int) -> Optional[ExtremePlayer]:
    if record is None:
        return None
    return ExtremePlayer(
        id=record.id,
        name=record.name,
        titles=list(record.titles),
        birth_year=record.birth_year,
        age=derive_age(record.birth_year, current_year),
        gender=record.gender,
        rating=record.rating(discipline.key) or None,
    )


def summarize_age_group(
    members: Sequence[PlayerRecord],
    descriptor: AgeGroupDescriptor,
    discipline: Discipline,
    current_year: int,
) -> AgeGroupStats:
    """Summarise one age group from its members, sorted by rating descending."""

    by_birth = sorted(
        (record for record in members if record.birth_year_value is not None),
        key=lambda record: record.birth_year_value,
        reverse=True,
    )
    youngest = by_birth[0] if by_birth else None
    oldest = by_birth[-1] if by_birth else None
    active = sum(1 for record in members if record.is_active)
    return AgeGroupStats(
        age_group=descriptor.code,
        min_birth_year=descriptor.min_birth_year,
        max_birth_year=descriptor.max_birth_year,
        total_players=len(members),
        active_players=active,
        inactive_players=len(members) - active,
        by_gender=GenderGroups(
            male=_gender_stats(members, "M", discipline),
            female=_gender_stats(members, "F", discipline),
        ),
        extremes=AgeGroupExtremes(
            youngest=_extreme(youngest, discipline, current_year),
            oldest=_extreme(oldest, discipline, current_year),
        ),
        rating_type=discipline.key,
    )


def build_age_group_stats(
    store: RecordStore,
    descriptors: Sequence[AgeGroupDescriptor],
    discipline: Discipline,
    current_year: int,
    *,
    gender: Optional[str] = None,
    include_inactive: bool = False,
    max_workers: int = 1,
) -> List[AgeGroupStats]:
    """One report per descriptor, in the order given."""

    sort = ranking_sort(discipline)

    def task(descriptor: AgeGroupDescriptor):
        def compute() -> AgeGroupStats:
            criteria = build_age_group_filter(descriptor, gender, include_inactive=include_inactive)
            members = store.find_many(criteria, sort=sort)
            return summarize_age_group(members, descriptor, discipline, current_year)

        return compute

    results = run_facets(
        {descriptor.code: task(descriptor) for descriptor in descriptors},
        max_workers=max_workers,
    )
    logger.info("Assembled %s age group reports (%s)", len(results), discipline.key)
    return [results[descriptor.code] for descriptor in descriptors]


__all__ = ["ROSTER_SIZE", "build_age_group_stats", "summarize_age_group"]
