"""Rating discipline configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from pyfide.errors import InvalidParameter


@dataclass(frozen=True)
class Discipline:
    key: str
    rating_field: str
    games_field: str
    k_field: str


_DISCIPLINES: Dict[str, Discipline] = {
    "standard": Discipline(
        key="standard",
        rating_field="standard_rating",
        games_field="standard_games",
        k_field="standard_k",
    ),
    "rapid": Discipline(
        key="rapid",
        rating_field="rapid_rating",
        games_field="rapid_games",
        k_field="rapid_k",
    ),
    "blitz": Discipline(
        key="blitz",
        rating_field="blitz_rating",
        games_field="blitz_games",
        k_field="blitz_k",
    ),
}

DEFAULT_DISCIPLINE = "standard"


def iter_disciplines() -> Iterable[Discipline]:
    """Return the disciplines in reporting order."""

    return _DISCIPLINES.values()


def get_discipline(key: str) -> Discipline:
    """Fetch a discipline by key, raising KeyError if missing."""

    normalized = key.strip().lower()
    if normalized not in _DISCIPLINES:
        raise KeyError(f"No rating discipline named {key!r}")
    return _DISCIPLINES[normalized]


def resolve_discipline(value: Optional[str], default: str = DEFAULT_DISCIPLINE) -> Discipline:
    """Resolve a user-supplied discipline, falling back to ``default`` when unknown."""

    if value:
        try:
            return get_discipline(str(value))
        except KeyError:
            pass
    return _DISCIPLINES[default]


def require_discipline(value: Optional[str], param: str = "ratingType") -> Discipline:
    """Resolve a user-supplied discipline, rejecting unknown keys."""

    if value is None or value == "":
        return _DISCIPLINES[DEFAULT_DISCIPLINE]
    try:
        return get_discipline(str(value))
    except KeyError:
        raise InvalidParameter(
            param,
            f"Invalid rating type. Allowed: {', '.join(_DISCIPLINES)}",
            {"allowed": list(_DISCIPLINES)},
        ) from None


# Field lookup for stores that need to map a discipline key to a column.
RATING_FIELDS: Mapping[str, str] = {key: d.rating_field for key, d in _DISCIPLINES.items()}
