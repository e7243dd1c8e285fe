"""Title-category summary and per-category player listings."""

from __future__ import annotations

import logging
from typing import Dict, Sequence

from pyfide.classify.titles import (
    ARBITER_CODES,
    COMPETITIVE_CODES,
    TRAINER_CODES,
    TitleCategory,
    other_title_breakdown,
    primary_title,
)
from pyfide.models.player import TITLE_SET_FIELDS
from pyfide.models.reports import (
    CompetitiveTitleSummary,
    PlayerTotals,
    StatusCounts,
    TitleCategoryListing,
    TitledPlayer,
    TitleGroupSummary,
    TitledSummary,
    TitleSummary,
)
from pyfide.query.filters import active_filter, build_title_filter, inactive_filter
from pyfide.query.predicates import MATCH_ALL, Equals, Filter, InSet, NonEmpty
from pyfide.query.ranking import NAME_SORT
from pyfide.store.base import Count, CountIf, FacetRow, FacetSpec, RecordStore

from .concurrency import run_facets


logger = logging.getLogger(__name__)

_STATUS_ACCUMULATORS = (
    ("count", Count()),
    ("active", CountIf(active_filter())),
    ("inactive", CountIf(inactive_filter())),
)


def _status(row: FacetRow) -> StatusCounts:
    return StatusCounts(
        total=row.get("count") or 0,
        active=row.get("active") or 0,
        inactive=row.get("inactive") or 0,
    )


def _summary_row(store: RecordStore, name: str, where: Filter, accumulators=_STATUS_ACCUMULATORS) -> FacetRow:
    spec = FacetSpec(name=name, where=where, accumulators=accumulators)
    rows = store.aggregate_facets([spec])[name]
    return rows[0] if rows else FacetRow(None, {})


def facet_player_status(store: RecordStore) -> PlayerTotals:
    counts = _status(_summary_row(store, "player_status", MATCH_ALL))
    return PlayerTotals(
        total_players=counts.total,
        active_players=counts.active,
        inactive_players=counts.inactive,
    )


def facet_title_group(store: RecordStore, name: str, codes: Sequence[str]) -> TitleGroupSummary:
    """Holders of any of ``codes`` in ``other_titles``, with per-code counts split by status."""

    holders = MATCH_ALL.where("other_titles", InSet(tuple(codes)))
    summary = FacetSpec(name=f"{name}_summary", where=holders, accumulators=_STATUS_ACCUMULATORS)
    per_code = FacetSpec(
        name=f"{name}_types",
        where=holders,
        unwind="other_titles",
        group_by="other_titles",
        accumulators=_STATUS_ACCUMULATORS,
    )
    results = store.aggregate_facets([summary, per_code])
    type_status: Dict[str, StatusCounts] = {code.lower(): StatusCounts() for code in codes}
    for row in results[per_code.name]:
        if row.key in codes:
            type_status[row.key.lower()] = _status(row)
    types = {key: counts.total for key, counts in type_status.items()}
    rows = results[summary.name]
    counts = _status(rows[0] if rows else FacetRow(None, {}))
    return TitleGroupSummary(**counts.model_dump(), types=types, type_status=type_status)


def facet_organizers(store: RecordStore) -> StatusCounts:
    return _status(_summary_row(store, "organizers", MATCH_ALL.where("additional_designations", NonEmpty())))


def facet_competitive_titles(store: RecordStore) -> CompetitiveTitleSummary:
    accumulators = _STATUS_ACCUMULATORS + tuple(
        (code.lower(), CountIf(MATCH_ALL.where("titles", Equals(code)))) for code in COMPETITIVE_CODES
    )
    row = _summary_row(store, "chess_players", build_title_filter(COMPETITIVE_CODES), accumulators)
    counts = _status(row)
    return CompetitiveTitleSummary(
        **counts.model_dump(),
        breakdown={code.lower(): row.get(code.lower()) or 0 for code in COMPETITIVE_CODES},
    )


def facet_titled_summary(store: RecordStore) -> TitledSummary:
    titled = MATCH_ALL.either(*(MATCH_ALL.where(field, NonEmpty()) for field in TITLE_SET_FIELDS[:3]))
    accumulators = _STATUS_ACCUMULATORS + (
        ("male", CountIf(MATCH_ALL.where("gender", Equals("M")))),
        ("female", CountIf(MATCH_ALL.where("gender", Equals("F")))),
    )
    row = _summary_row(store, "titled", titled, accumulators)
    return TitledSummary(
        total_titled_players=row.get("count") or 0,
        active_titled_players=row.get("active") or 0,
        inactive_titled_players=row.get("inactive") or 0,
        male_count=row.get("male") or 0,
        female_count=row.get("female") or 0,
    )


def build_title_summary(store: RecordStore, *, max_workers: int = 1) -> TitleSummary:
    """Counts for trainers, arbiters, organizers and competitive titles.

    Every facet covers the whole population; activity status is reported
    alongside the counts rather than used to filter them.
    """

    results = run_facets(
        {
            "player_status": lambda: facet_player_status(store),
            "trainers": lambda: facet_title_group(store, "trainers", TRAINER_CODES),
            "arbiters": lambda: facet_title_group(store, "arbiters", ARBITER_CODES),
            "organizers": lambda: facet_organizers(store),
            "chess_players": lambda: facet_competitive_titles(store),
            "summary": lambda: facet_titled_summary(store),
        },
        max_workers=max_workers,
    )
    return TitleSummary(**results)


def build_title_listing(store: RecordStore, category: TitleCategory, title_type: str) -> TitleCategoryListing:
    """Every holder of the category's codes, sorted by name."""

    players = store.find_many(build_title_filter(category.codes), sort=NAME_SORT)
    active = sum(1 for record in players if record.is_active)
    breakdown = other_title_breakdown(players, category.codes) if category.is_grouped else None
    logger.debug("Title listing %s matched %s players", category.key, len(players))
    return TitleCategoryListing(
        title_type=title_type,
        total_count=len(players),
        active_count=active,
        inactive_count=len(players) - active,
        breakdown=breakdown,
        players=[
            TitledPlayer.model_validate(
                {
                    **record.model_dump(),
                    "status": record.activity_status,
                    "primary_title": primary_title(record, category.codes),
                }
            )
            for record in players
        ],
    )


__all__ = ["build_title_listing", "build_title_summary"]
