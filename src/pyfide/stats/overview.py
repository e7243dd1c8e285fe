"""Overall population statistics.

Each facet is an independent function that issues its own facet query
against the record store and returns a typed model. ``build_player_stats``
runs them concurrently over the same population filter and assembles the
report; a failing facet fails the whole report.
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from pyfide.classify.age import AGE_BUCKETS
from pyfide.classify.ratings import (
    PRESENCE_PATTERNS,
    RATED_COMBINATIONS,
    RATING_FIELDS,
    UNRATED,
    presence_filter,
    rated_filter,
    unrated_filter,
)
from pyfide.models.reports import (
    AgeBucketStats,
    AverageRatings,
    FederationCount,
    GenderCount,
    GenderRatedCounts,
    PlayerStatsReport,
    PlayerTotals,
    RatedCounts,
    RatingPresenceCounts,
    RatingStatistics,
    TitleCount,
    TitleStatistics,
)
from pyfide.query.filters import active_filter, inactive_filter
from pyfide.query.predicates import MATCH_ALL, Equals, Filter, NonEmpty
from pyfide.store.base import AgeBuckets, Count, CountIf, FacetRow, FacetSpec, Mean, RecordStore

from .concurrency import run_facets


logger = logging.getLogger(__name__)

TOP_FEDERATIONS = 20

_MALE = MATCH_ALL.where("gender", Equals("M"))
_FEMALE = MATCH_ALL.where("gender", Equals("F"))
_TITLED = MATCH_ALL.where("titles", NonEmpty())


def round_rating(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value else None


def _mean_accumulators() -> tuple:
    return tuple((field, Mean(field)) for field in RATING_FIELDS)


def _presence_accumulators() -> tuple:
    return tuple((name, CountIf(presence_filter(name))) for name in PRESENCE_PATTERNS)


def _averages(row: FacetRow) -> AverageRatings:
    return AverageRatings(
        standard=round_rating(row.get("standard_rating")),
        rapid=round_rating(row.get("rapid_rating")),
        blitz=round_rating(row.get("blitz_rating")),
    )


def _presence_counts(row: FacetRow) -> RatingPresenceCounts:
    return RatingPresenceCounts(**{name: row.get(name) or 0 for name in RATED_COMBINATIONS})


def _single(store: RecordStore, spec: FacetSpec) -> FacetRow:
    rows = store.aggregate_facets([spec])[spec.name]
    return rows[0] if rows else FacetRow(None, {})


def facet_totals(store: RecordStore, population: Filter) -> PlayerTotals:
    row = _single(
        store,
        FacetSpec(
            name="totals",
            where=population,
            accumulators=(
                ("count", Count()),
                ("active", CountIf(active_filter())),
                ("inactive", CountIf(inactive_filter())),
            ),
        ),
    )
    return PlayerTotals(
        total_players=row.get("count") or 0,
        active_players=row.get("active") or 0,
        inactive_players=row.get("inactive") or 0,
    )


def facet_gender_breakdown(store: RecordStore, population: Filter) -> List[GenderCount]:
    spec = FacetSpec(name="by_gender", where=population, group_by="gender")
    rows = store.aggregate_facets([spec])[spec.name]
    return [GenderCount(gender=row.key, count=row["count"]) for row in rows]


def facet_federation_breakdown(
    store: RecordStore,
    population: Filter,
    limit: int = TOP_FEDERATIONS,
) -> List[FederationCount]:
    spec = FacetSpec(
        name="by_federation",
        where=population,
        group_by="federation",
        sort_by="count",
        limit=limit,
    )
    rows = store.aggregate_facets([spec])[spec.name]
    return [FederationCount(federation=row.key, count=row["count"]) for row in rows]


def facet_average_ratings(store: RecordStore, population: Filter) -> AverageRatings:
    row = _single(store, FacetSpec(name="averages", where=population, accumulators=_mean_accumulators()))
    return _averages(row)


def facet_rating_distribution(store: RecordStore, population: Filter) -> RatingStatistics:
    row = _single(
        store,
        FacetSpec(
            name="rating_distribution",
            where=population,
            accumulators=_presence_accumulators() + (("at_least_one", CountIf(rated_filter())),),
        ),
    )
    return RatingStatistics(
        players_with_ratings=_presence_counts(row),
        players_with_at_least_one_rating=row.get("at_least_one") or 0,
        unrated_players=row.get(UNRATED) or 0,
    )


def facet_title_statistics(store: RecordStore, population: Filter) -> TitleStatistics:
    titled = population.merge(_TITLED)
    gender_split = (("count", Count()), ("men", CountIf(_MALE)), ("women", CountIf(_FEMALE)))
    summary_spec = FacetSpec(name="titled", where=titled, accumulators=gender_split)
    distribution_spec = FacetSpec(
        name="title_distribution",
        where=titled,
        unwind="titles",
        group_by="titles",
        accumulators=gender_split,
        sort_by="count",
    )
    results = store.aggregate_facets([summary_spec, distribution_spec])
    summary = results[summary_spec.name][0] if results[summary_spec.name] else FacetRow(None, {})
    return TitleStatistics(
        total_titled_players=summary.get("count") or 0,
        men_with_titles=summary.get("men") or 0,
        women_with_titles=summary.get("women") or 0,
        title_distribution=[
            TitleCount(title=row.key, count=row["count"], men=row["men"], women=row["women"])
            for row in results[distribution_spec.name]
        ],
    )


def facet_age_distribution(
    store: RecordStore,
    population: Filter,
    reference_year: int,
) -> List[AgeBucketStats]:
    rated = rated_filter()
    spec = FacetSpec(
        name="age_distribution",
        where=population,
        group_by=AgeBuckets(reference_year),
        accumulators=(
            ("count", Count()),
            *_mean_accumulators(),
            ("rated", CountIf(rated)),
            ("unrated", CountIf(unrated_filter())),
            *_presence_accumulators(),
            ("male_total", CountIf(_MALE)),
            ("female_total", CountIf(_FEMALE)),
            ("male_rated", CountIf(_MALE.merge(rated))),
            ("female_rated", CountIf(_FEMALE.merge(rated))),
        ),
    )
    rows = store.aggregate_facets([spec])[spec.name]
    buckets = {bucket.lower: bucket for bucket in AGE_BUCKETS}
    distribution = []
    for row in rows:
        bucket = buckets[row.key]
        male_total = row.get("male_total") or 0
        female_total = row.get("female_total") or 0
        male_rated = row.get("male_rated") or 0
        female_rated = row.get("female_rated") or 0
        distribution.append(
            AgeBucketStats(
                age_group=bucket.group_label,
                age_range=bucket.range_label,
                total_players=row["count"],
                rated_players=row.get("rated") or 0,
                unrated_players=row.get("unrated") or 0,
                rating_breakdown=_presence_counts(row),
                avg_ratings=_averages(row),
                by_gender=GenderRatedCounts(
                    male=RatedCounts(
                        total_players=male_total,
                        rated_players=male_rated,
                        unrated_players=male_total - male_rated,
                    ),
                    female=RatedCounts(
                        total_players=female_total,
                        rated_players=female_rated,
                        unrated_players=female_total - female_rated,
                    ),
                ),
            )
        )
    return distribution


def build_player_stats(
    store: RecordStore,
    *,
    reference_year: int,
    include_inactive: bool = False,
    max_workers: int = 1,
) -> PlayerStatsReport:
    """Assemble the consolidated statistics report."""

    population = MATCH_ALL if include_inactive else active_filter()
    started = time.perf_counter()
    results = run_facets(
        {
            "totals": lambda: facet_totals(store, population),
            "by_gender": lambda: facet_gender_breakdown(store, population),
            "by_federation": lambda: facet_federation_breakdown(store, population),
            "averages": lambda: facet_average_ratings(store, population),
            "ratings": lambda: facet_rating_distribution(store, population),
            "titles": lambda: facet_title_statistics(store, population),
            "ages": lambda: facet_age_distribution(store, population, reference_year),
        },
        max_workers=max_workers,
    )
    totals: PlayerTotals = results["totals"]
    logger.info(
        "Assembled player statistics for %s players in %.3fs",
        totals.total_players,
        time.perf_counter() - started,
    )
    return PlayerStatsReport(
        total_players=totals.total_players,
        active_players=totals.active_players,
        inactive_players=totals.inactive_players,
        by_gender=results["by_gender"],
        by_federation=results["by_federation"],
        average_ratings=results["averages"],
        title_statistics=results["titles"],
        rating_statistics=results["ratings"],
        age_group_distribution=results["ages"],
    )
