"""Rating-presence classification across the three disciplines."""

from __future__ import annotations

from typing import Mapping, Tuple

from pyfide.models.player import PlayerRecord
from pyfide.query.predicates import MATCH_ALL, Equals, Filter, Range


RATING_FIELDS: Tuple[str, str, str] = ("standard_rating", "rapid_rating", "blitz_rating")

UNRATED = "unrated"

# (standard, rapid, blitz) rated-ness for each mutually exclusive combination.
PRESENCE_PATTERNS: Mapping[str, Tuple[bool, bool, bool]] = {
    "all_three_ratings": (True, True, True),
    "standard_and_rapid_only": (True, True, False),
    "rapid_and_blitz_only": (False, True, True),
    "blitz_and_standard_only": (True, False, True),
    "standard_only": (True, False, False),
    "rapid_only": (False, True, False),
    "blitz_only": (False, False, True),
    UNRATED: (False, False, False),
}

RATED_COMBINATIONS: Tuple[str, ...] = tuple(name for name in PRESENCE_PATTERNS if name != UNRATED)

_BY_PATTERN = {pattern: name for name, pattern in PRESENCE_PATTERNS.items()}


def rating_presence(record: PlayerRecord) -> str:
    """Name of the combination of disciplines in which ``record`` is rated."""

    pattern = tuple(getattr(record, field) > 0 for field in RATING_FIELDS)
    return _BY_PATTERN[pattern]


def presence_filter(name: str) -> Filter:
    criteria = MATCH_ALL
    for field, rated in zip(RATING_FIELDS, PRESENCE_PATTERNS[name]):
        criteria = criteria.where(field, Range(gte=1) if rated else Equals(0))
    return criteria


def rated_filter() -> Filter:
    """At least one discipline rated."""

    return MATCH_ALL.either(*(MATCH_ALL.where(field, Range(gte=1)) for field in RATING_FIELDS))


def unrated_filter() -> Filter:
    return presence_filter(UNRATED)


__all__ = [
    "PRESENCE_PATTERNS",
    "RATED_COMBINATIONS",
    "RATING_FIELDS",
    "UNRATED",
    "presence_filter",
    "rated_filter",
    "rating_presence",
    "unrated_filter",
]
