"""Translate validated request parameters into record-store filters.

Every builder validates its inputs and raises :class:`InvalidParameter`
before a filter is returned, so no store call is issued for bad input.
Absent parameters leave the corresponding dimension unconstrained.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from pyfide.classify.age import AgeGroupDescriptor
from pyfide.errors import InvalidParameter
from pyfide.models.player import ACTIVE_FLAGS, INACTIVE_FLAGS, TITLE_SET_FIELDS

from .predicates import MATCH_ALL, Contains, Equals, Filter, InSet, NonEmpty, Range


VALID_GENDERS = ("M", "F")


@dataclass(frozen=True)
class SearchParams:
    """Raw advanced-search parameters as received from the caller."""

    federation: Optional[str] = None
    gender: Optional[str] = None
    title: Optional[str] = None
    min_rating: Optional[Any] = None
    max_rating: Optional[Any] = None
    has_title: Optional[Any] = None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_flag(value: Any) -> bool:
    """Boolean query flag; only ``true`` (any case) or ``True`` enables it."""

    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def parse_gender(value: Any, param: str = "gender") -> Optional[str]:
    if _is_blank(value):
        return None
    gender = str(value).strip()
    if gender not in VALID_GENDERS:
        raise InvalidParameter(param, f"{param.capitalize()} must be 'M' or 'F'", {"value": gender})
    return gender


def parse_rating_bound(value: Any, param: str) -> Optional[int]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise InvalidParameter(param, f"{param} must be a valid number", {"value": value})
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not text.lstrip("-").isdigit():
            raise InvalidParameter(param, f"{param} must be a valid number", {"value": text})
        number = int(text)
    if number < 0:
        raise InvalidParameter(param, f"{param} must not be negative", {"value": number})
    return number


def normalize_federation(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip().upper()


def active_filter() -> Filter:
    return MATCH_ALL.where("activity_flag", InSet(ACTIVE_FLAGS))


def inactive_filter() -> Filter:
    return MATCH_ALL.where("activity_flag", InSet(INACTIVE_FLAGS))


def build_search_filter(params: SearchParams) -> Filter:
    """Advanced search filter.

    When both ``title`` and ``has_title`` are supplied the non-empty-titles
    predicate replaces the specific-title predicate on the same field.
    """

    criteria = MATCH_ALL
    federation = normalize_federation(params.federation)
    if federation:
        criteria = criteria.where("federation", Equals(federation))

    gender = parse_gender(params.gender)
    if gender:
        criteria = criteria.where("gender", Equals(gender))

    if not _is_blank(params.title):
        criteria = criteria.where("titles", InSet((str(params.title).strip(),)))
    if parse_flag(params.has_title):
        criteria = criteria.where("titles", NonEmpty())

    min_rating = parse_rating_bound(params.min_rating, "minRating")
    max_rating = parse_rating_bound(params.max_rating, "maxRating")
    if min_rating is not None or max_rating is not None:
        criteria = criteria.where("standard_rating", Range(gte=min_rating, lte=max_rating))
    return criteria


def build_ranking_filter(
    gender: Any = None,
    federation: Any = None,
    include_inactive: bool = False,
) -> Filter:
    criteria = MATCH_ALL
    parsed_gender = parse_gender(gender)
    if parsed_gender:
        criteria = criteria.where("gender", Equals(parsed_gender))
    normalized = normalize_federation(federation)
    if normalized:
        criteria = criteria.where("federation", Equals(normalized))
    if not include_inactive:
        criteria = criteria.where("activity_flag", InSet(ACTIVE_FLAGS))
    return criteria


def build_name_filter(name: Any) -> Filter:
    if _is_blank(name):
        raise InvalidParameter("name", "Search name is required")
    return MATCH_ALL.where("name", Contains(str(name).strip()))


def build_id_filter(player_id: Any, param: str = "id") -> Filter:
    if _is_blank(player_id):
        raise InvalidParameter(param, "Player ID is required")
    return MATCH_ALL.where("id", Equals(str(player_id).strip()))


def build_federation_filter(federation: Any, gender: Any = None) -> Filter:
    normalized = normalize_federation(federation)
    if not normalized:
        raise InvalidParameter("federation", "Federation code is required")
    criteria = MATCH_ALL.where("federation", Equals(normalized))
    parsed_gender = parse_gender(gender)
    if parsed_gender:
        criteria = criteria.where("gender", Equals(parsed_gender))
    return criteria


def build_age_group_filter(
    descriptor: AgeGroupDescriptor,
    gender: Any = None,
    include_inactive: bool = True,
) -> Filter:
    criteria = MATCH_ALL.where(
        "birth_year",
        Range(gte=descriptor.min_birth_year, lte=descriptor.max_birth_year),
    )
    parsed_gender = parse_gender(gender)
    if parsed_gender:
        criteria = criteria.where("gender", Equals(parsed_gender))
    if not include_inactive:
        criteria = criteria.where("activity_flag", InSet(ACTIVE_FLAGS))
    return criteria


def build_title_filter(codes: Sequence[str]) -> Filter:
    """Records holding any of ``codes`` in any of the three title sets."""

    values = tuple(codes)
    return MATCH_ALL.either(
        *(MATCH_ALL.where(field, InSet(values)) for field in TITLE_SET_FIELDS[:3])
    )


__all__ = [
    "SearchParams",
    "active_filter",
    "build_age_group_filter",
    "build_federation_filter",
    "build_id_filter",
    "build_name_filter",
    "build_ranking_filter",
    "build_search_filter",
    "build_title_filter",
    "inactive_filter",
    "normalize_federation",
    "parse_flag",
    "parse_gender",
    "parse_rating_bound",
]
