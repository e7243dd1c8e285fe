"""Filter construction, pagination and ranking."""

from .filters import (
    SearchParams,
    active_filter,
    build_age_group_filter,
    build_federation_filter,
    build_id_filter,
    build_name_filter,
    build_ranking_filter,
    build_search_filter,
    build_title_filter,
    inactive_filter,
    parse_flag,
    parse_gender,
    parse_rating_bound,
)
from .pagination import PageRequest, build_envelope, normalize_pagination
from .predicates import MATCH_ALL, Contains, Equals, Filter, InSet, NonEmpty, Range, matches
from .ranking import NAME_SORT, SortKey, SortSpec, assign_ranks, assign_ranks_with_age, ranking_sort

__all__ = [
    "MATCH_ALL",
    "NAME_SORT",
    "Contains",
    "Equals",
    "Filter",
    "InSet",
    "NonEmpty",
    "PageRequest",
    "Range",
    "SearchParams",
    "SortKey",
    "SortSpec",
    "active_filter",
    "assign_ranks",
    "assign_ranks_with_age",
    "build_age_group_filter",
    "build_envelope",
    "build_federation_filter",
    "build_id_filter",
    "build_name_filter",
    "build_ranking_filter",
    "build_search_filter",
    "build_title_filter",
    "inactive_filter",
    "matches",
    "normalize_pagination",
    "parse_flag",
    "parse_gender",
    "parse_rating_bound",
    "ranking_sort",
]
