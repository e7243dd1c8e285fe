"""Closed set of record predicates understood by every record store.

A :class:`Filter` is an immutable conjunction of ``(field, predicate)``
clauses, optionally combined with nested conjunctions (``all_of``) and one
disjunction group (``any_of``). Stores translate filters into their own query
language; :func:`matches` is the reference evaluation used by the in-memory
store and by facet post-processing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from pyfide.models.player import TITLE_SET_FIELDS, PlayerRecord


SET_FIELDS = frozenset(TITLE_SET_FIELDS)
NUMERIC_TEXT_FIELDS = frozenset({"birth_year"})
KNOWN_FIELDS = frozenset(PlayerRecord.model_fields)


@dataclass(frozen=True)
class Equals:
    value: Any


@dataclass(frozen=True)
class InSet:
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Range:
    gte: Optional[int] = None
    lte: Optional[int] = None


@dataclass(frozen=True)
class NonEmpty:
    pass


@dataclass(frozen=True)
class Contains:
    text: str


Predicate = Union[Equals, InSet, Range, NonEmpty, Contains]


def _check_field(field: str) -> None:
    if field not in KNOWN_FIELDS:
        raise ValueError(f"Unknown record field {field!r}")


@dataclass(frozen=True)
class Filter:
    clauses: Tuple[Tuple[str, Predicate], ...] = ()
    all_of: Tuple["Filter", ...] = ()
    any_of: Tuple["Filter", ...] = ()

    def where(self, field: str, predicate: Predicate) -> "Filter":
        """Return a copy constraining ``field``; an existing clause on it is replaced."""

        _check_field(field)
        kept = tuple((name, pred) for name, pred in self.clauses if name != field)
        return Filter(kept + ((field, predicate),), self.all_of, self.any_of)

    def either(self, *alternatives: "Filter") -> "Filter":
        """Return a copy that additionally requires one of ``alternatives`` to match."""

        return Filter(self.clauses, self.all_of, tuple(alternatives))

    def merge(self, other: "Filter") -> "Filter":
        """Conjunction of two filters."""

        if other.is_empty:
            return self
        if self.is_empty:
            return other
        return Filter(all_of=(self, other))

    def get(self, field: str) -> Optional[Predicate]:
        for name, predicate in self.clauses:
            if name == field:
                return predicate
        return None

    @property
    def is_empty(self) -> bool:
        return not (self.clauses or self.all_of or self.any_of)


MATCH_ALL = Filter()


def _as_number(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def predicate_matches(value: Any, predicate: Predicate, *, is_set: bool) -> bool:
    if isinstance(predicate, Equals):
        return predicate.value in value if is_set else value == predicate.value
    if isinstance(predicate, InSet):
        if is_set:
            return any(item in predicate.values for item in value)
        return value in predicate.values
    if isinstance(predicate, Range):
        number = _as_number(value)
        if number is None:
            return False
        if predicate.gte is not None and number < predicate.gte:
            return False
        if predicate.lte is not None and number > predicate.lte:
            return False
        return True
    if isinstance(predicate, NonEmpty):
        return bool(value) if is_set else value not in (None, "")
    if isinstance(predicate, Contains):
        return isinstance(value, str) and predicate.text.lower() in value.lower()
    raise TypeError(f"Unsupported predicate {predicate!r}")


def matches(record: PlayerRecord, criteria: Filter) -> bool:
    """Evaluate ``criteria`` against a single record."""

    for field, predicate in criteria.clauses:
        if not predicate_matches(getattr(record, field), predicate, is_set=field in SET_FIELDS):
            return False
    if not all(matches(record, sub) for sub in criteria.all_of):
        return False
    if criteria.any_of and not any(matches(record, sub) for sub in criteria.any_of):
        return False
    return True


__all__ = [
    "Contains",
    "Equals",
    "Filter",
    "InSet",
    "MATCH_ALL",
    "NonEmpty",
    "Predicate",
    "Range",
    "SET_FIELDS",
    "matches",
    "predicate_matches",
]
