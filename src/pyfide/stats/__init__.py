"""Report assembly over a record store."""

from .age_groups import build_age_group_stats, summarize_age_group
from .concurrency import run_facets
from .overview import build_player_stats
from .titles import build_title_listing, build_title_summary

__all__ = [
    "build_age_group_stats",
    "build_player_stats",
    "build_title_listing",
    "build_title_summary",
    "run_facets",
    "summarize_age_group",
]
