"""Canonical record and report models."""

from .player import ACTIVE_FLAGS, INACTIVE_FLAGS, CamelModel, Gender, PlayerRecord
from .reports import (
    AgedRankedPlayer,
    AgeGroupRankedPage,
    AgeGroupStats,
    FederationPage,
    PaginationEnvelope,
    PlayerPage,
    PlayerStatsReport,
    RankedPage,
    RankedPlayer,
    TitleCategoryListing,
    TitledPlayer,
    TitleSummary,
)

__all__ = [
    "ACTIVE_FLAGS",
    "INACTIVE_FLAGS",
    "CamelModel",
    "Gender",
    "PlayerRecord",
    "AgedRankedPlayer",
    "AgeGroupRankedPage",
    "AgeGroupStats",
    "FederationPage",
    "PaginationEnvelope",
    "PlayerPage",
    "PlayerStatsReport",
    "RankedPage",
    "RankedPlayer",
    "TitleCategoryListing",
    "TitledPlayer",
    "TitleSummary",
]
