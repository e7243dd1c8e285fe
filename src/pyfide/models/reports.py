"""Result models returned by the catalog engine."""

from __future__ import annotations

from typing import Dict, List, Optional

from .player import CamelModel, PlayerRecord


class PaginationEnvelope(CamelModel):
    page: int
    size: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


class RankedPlayer(PlayerRecord):
    rank: int


class AgedRankedPlayer(RankedPlayer):
    age: Optional[int] = None


class TitledPlayer(PlayerRecord):
    status: str
    primary_title: Optional[str] = None


class PlayerPage(CamelModel):
    data: List[PlayerRecord]
    pagination: PaginationEnvelope


class FederationPage(PlayerPage):
    federation: str


class RankedPage(CamelModel):
    data: List[RankedPlayer]
    pagination: PaginationEnvelope


class AgeGroupRankedPage(CamelModel):
    data: List[AgedRankedPlayer]
    pagination: PaginationEnvelope
    group_code: str


# -- overall statistics -----------------------------------------------------


class PlayerTotals(CamelModel):
    total_players: int = 0
    active_players: int = 0
    inactive_players: int = 0


class GenderCount(CamelModel):
    gender: str
    count: int


class FederationCount(CamelModel):
    federation: str
    count: int


class AverageRatings(CamelModel):
    standard: Optional[float] = None
    rapid: Optional[float] = None
    blitz: Optional[float] = None


class RatingPresenceCounts(CamelModel):
    all_three_ratings: int = 0
    standard_and_rapid_only: int = 0
    rapid_and_blitz_only: int = 0
    blitz_and_standard_only: int = 0
    standard_only: int = 0
    rapid_only: int = 0
    blitz_only: int = 0

    def total(self) -> int:
        return sum(self.model_dump().values())


class RatingStatistics(CamelModel):
    players_with_ratings: RatingPresenceCounts
    players_with_at_least_one_rating: int = 0
    unrated_players: int = 0


class TitleCount(CamelModel):
    title: str
    count: int
    men: int = 0
    women: int = 0


class TitleStatistics(CamelModel):
    total_titled_players: int = 0
    men_with_titles: int = 0
    women_with_titles: int = 0
    title_distribution: List[TitleCount] = []


class RatedCounts(CamelModel):
    total_players: int = 0
    rated_players: int = 0
    unrated_players: int = 0


class GenderRatedCounts(CamelModel):
    male: RatedCounts
    female: RatedCounts


class AgeBucketStats(CamelModel):
    age_group: str
    age_range: str
    total_players: int
    rated_players: int
    unrated_players: int
    rating_breakdown: RatingPresenceCounts
    avg_ratings: AverageRatings
    by_gender: GenderRatedCounts


class PlayerStatsReport(CamelModel):
    total_players: int
    active_players: int
    inactive_players: int
    by_gender: List[GenderCount]
    by_federation: List[FederationCount]
    average_ratings: AverageRatings
    title_statistics: TitleStatistics
    rating_statistics: RatingStatistics
    age_group_distribution: List[AgeBucketStats]


# -- per age group statistics -------------------------------------------------


class RosterEntry(CamelModel):
    id: str
    name: str
    titles: List[str]
    rating: int
    birth_year: Optional[str] = None


class RatedGroup(CamelModel):
    count: int = 0
    avg_rating_top10: Optional[float] = None
    top10_players: List[RosterEntry] = []


class UnratedGroup(CamelModel):
    count: int = 0


class GenderGroupStats(CamelModel):
    total_count: int = 0
    with_rating: RatedGroup
    without_rating: UnratedGroup


class GenderGroups(CamelModel):
    male: GenderGroupStats
    female: GenderGroupStats


class ExtremePlayer(CamelModel):
    id: str
    name: str
    titles: List[str]
    birth_year: Optional[str] = None
    age: Optional[int] = None
    gender: str
    rating: Optional[int] = None


class AgeGroupExtremes(CamelModel):
    youngest: Optional[ExtremePlayer] = None
    oldest: Optional[ExtremePlayer] = None


class AgeGroupStats(CamelModel):
    age_group: str
    min_birth_year: int
    max_birth_year: int
    total_players: int
    active_players: int
    inactive_players: int
    by_gender: GenderGroups
    extremes: AgeGroupExtremes
    rating_type: str


# -- titles ---------------------------------------------------------------------


class StatusCounts(CamelModel):
    total: int = 0
    active: int = 0
    inactive: int = 0


class TitleGroupSummary(StatusCounts):
    types: Dict[str, int] = {}
    type_status: Dict[str, StatusCounts] = {}


class CompetitiveTitleSummary(StatusCounts):
    breakdown: Dict[str, int] = {}


class TitledSummary(CamelModel):
    total_titled_players: int = 0
    active_titled_players: int = 0
    inactive_titled_players: int = 0
    male_count: int = 0
    female_count: int = 0


class TitleSummary(CamelModel):
    player_status: PlayerTotals
    trainers: TitleGroupSummary
    arbiters: TitleGroupSummary
    organizers: StatusCounts
    chess_players: CompetitiveTitleSummary
    summary: TitledSummary


class TitleCategoryListing(CamelModel):
    title_type: str
    total_count: int
    active_count: int
    inactive_count: int
    breakdown: Optional[Dict[str, int]] = None
    players: List[TitledPlayer]
