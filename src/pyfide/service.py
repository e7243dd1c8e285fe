"""Catalog operations: lookups, searches, rankings and reports.

Each public method validates its raw inputs first, so a bad request never
reaches the record store, then issues the store calls and shapes the
result into a report model.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, List, Optional

from pyfide.classify.age import age_group_range, all_age_groups
from pyfide.classify.titles import resolve_title_category
from pyfide.config.disciplines import get_discipline, require_discipline, resolve_discipline
from pyfide.errors import InvalidParameter, NotFound
from pyfide.models.player import PlayerRecord
from pyfide.models.reports import (
    AgeGroupRankedPage,
    AgeGroupStats,
    FederationPage,
    PlayerPage,
    PlayerStatsReport,
    RankedPage,
    TitleCategoryListing,
    TitleSummary,
)
from pyfide.query.filters import (
    SearchParams,
    build_age_group_filter,
    build_federation_filter,
    build_id_filter,
    build_name_filter,
    build_ranking_filter,
    build_search_filter,
    normalize_federation,
    parse_gender,
)
from pyfide.query.pagination import PageRequest, build_envelope, normalize_pagination
from pyfide.query.predicates import Filter
from pyfide.query.ranking import NAME_SORT, SortSpec, assign_ranks, assign_ranks_with_age, ranking_sort
from pyfide.stats import build_age_group_stats, build_player_stats, build_title_listing, build_title_summary
from pyfide.store.base import RecordStore


logger = logging.getLogger(__name__)

Clock = Callable[[], date]


class PlayerCatalog:
    """Read-only query engine over a :class:`RecordStore`."""

    def __init__(self, store: RecordStore, clock: Clock = date.today, facet_workers: int = 1):
        self.store = store
        self.clock = clock
        self.facet_workers = max(1, int(facet_workers))

    def current_year(self) -> int:
        return self.clock().year

    def _page(self, criteria: Filter, request: PageRequest, sort: SortSpec) -> tuple[List[PlayerRecord], int]:
        total = self.store.count(criteria)
        records = self.store.find_many(criteria, sort=sort, skip=request.skip, limit=request.limit)
        logger.debug("Page %s/%s matched %s players", request.page, request.size, total)
        return records, total

    # -- lookups ----------------------------------------------------------

    def get_player(self, player_id: Any) -> PlayerRecord:
        criteria = build_id_filter(player_id)
        record = self.store.find_one(criteria)
        if record is None:
            raise NotFound(f"Player with ID {str(player_id).strip()} not found", {"id": str(player_id).strip()})
        return record

    def search_by_fide_id(self, player_id: Any) -> PlayerRecord:
        if player_id is None or not str(player_id).strip():
            raise InvalidParameter("id", "FIDE ID query parameter is required")
        record = self.store.find_one(build_id_filter(player_id))
        if record is None:
            raise NotFound(f"No player found with FIDE ID {str(player_id).strip()}", {"id": str(player_id).strip()})
        return record

    # -- searches ---------------------------------------------------------

    def search_by_name(self, name: Any, page: Any = None, size: Any = None) -> PlayerPage:
        criteria = build_name_filter(name)
        request = normalize_pagination(page, size)
        records, total = self._page(criteria, request, NAME_SORT)
        return PlayerPage(data=records, pagination=build_envelope(request, total))

    def advanced_search(self, params: SearchParams, page: Any = None, size: Any = None) -> PlayerPage:
        criteria = build_search_filter(params)
        request = normalize_pagination(page, size)
        records, total = self._page(criteria, request, NAME_SORT)
        return PlayerPage(data=records, pagination=build_envelope(request, total))

    def players_by_federation(
        self,
        federation: Any,
        sort_by: Any = None,
        gender: Any = None,
        page: Any = None,
        size: Any = None,
    ) -> FederationPage:
        criteria = build_federation_filter(federation, gender)
        request = normalize_pagination(page, size)
        discipline = resolve_discipline(sort_by)
        records, total = self._page(criteria, request, ranking_sort(discipline))
        return FederationPage(
            data=records,
            pagination=build_envelope(request, total),
            federation=normalize_federation(federation),
        )

    # -- rankings ---------------------------------------------------------

    def rankings(
        self,
        discipline: str,
        gender: Any = None,
        federation: Any = None,
        page: Any = None,
        size: Any = None,
        include_inactive: bool = False,
    ) -> RankedPage:
        """Players ranked by one discipline's rating, active-only by default."""

        rated = get_discipline(discipline)
        criteria = build_ranking_filter(gender, federation, include_inactive)
        request = normalize_pagination(page, size)
        records, total = self._page(criteria, request, ranking_sort(rated))
        return RankedPage(data=assign_ranks(records, request), pagination=build_envelope(request, total))

    def rankings_by_age_group(
        self,
        group_code: Any,
        gender: Any = None,
        rating_type: Any = None,
        page: Any = None,
        size: Any = None,
    ) -> AgeGroupRankedPage:
        current_year = self.current_year()
        descriptor = age_group_range(group_code, current_year)
        criteria = build_age_group_filter(descriptor, gender)
        request = normalize_pagination(page, size)
        # Unknown rating types fall back to standard here.
        discipline = resolve_discipline(rating_type)
        records, total = self._page(criteria, request, ranking_sort(discipline))
        return AgeGroupRankedPage(
            data=assign_ranks_with_age(records, request, current_year),
            pagination=build_envelope(request, total),
            group_code=descriptor.code,
        )

    # -- reports ----------------------------------------------------------

    def player_stats(self, include_inactive: bool = False) -> PlayerStatsReport:
        return build_player_stats(
            self.store,
            reference_year=self.current_year(),
            include_inactive=include_inactive,
            max_workers=self.facet_workers,
        )

    def age_group_stats(
        self,
        group_code: Optional[str] = None,
        rating_type: Any = None,
        gender: Any = None,
        include_inactive: bool = False,
    ) -> AgeGroupStats | List[AgeGroupStats]:
        """Statistics for one age group, or for all of them when no code is given."""

        parsed_gender = parse_gender(gender)
        current_year = self.current_year()
        single = group_code is not None and bool(str(group_code).strip())
        if not single:
            descriptors = all_age_groups(current_year)
        else:
            descriptors = (age_group_range(group_code, current_year),)
        discipline = require_discipline(rating_type)
        reports = build_age_group_stats(
            self.store,
            descriptors,
            discipline,
            current_year,
            gender=parsed_gender,
            include_inactive=include_inactive,
            max_workers=self.facet_workers,
        )
        return reports[0] if single else reports

    def players_by_title_type(self, title_type: Any) -> TitleCategoryListing:
        category = resolve_title_category(title_type)
        return build_title_listing(self.store, category, str(title_type).strip())

    def title_summary(self) -> TitleSummary:
        return build_title_summary(self.store, max_workers=self.facet_workers)


__all__ = ["Clock", "PlayerCatalog"]
