"""Age-group codes and statistics age buckets.

Two independent classifications are supported:

* the eleven canonical age-group codes (``U8`` … ``U18``, ``S20`` … ``S70``)
  used by age-scoped rankings and the per-group statistics report, resolved
  to an inclusive birth-year window relative to a reference year;
* the finer single-year age buckets used only by the overall statistics
  report.

The reference year is always passed in explicitly so that classification is
deterministic for a given request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from pyfide.errors import InvalidParameter


YOUTH_CODES: Tuple[str, ...] = ("U8", "U10", "U12", "U14", "U16", "U18")
SENIOR_CODES: Tuple[str, ...] = ("S20", "S40", "S50", "S60", "S70")
AGE_GROUP_CODES: Tuple[str, ...] = YOUTH_CODES + SENIOR_CODES

SENIOR_WINDOW_YEARS = 10


@dataclass(frozen=True)
class AgeGroupDescriptor:
    code: str
    min_birth_year: int
    max_birth_year: int

    def contains(self, birth_year: Optional[int]) -> bool:
        return birth_year is not None and self.min_birth_year <= birth_year <= self.max_birth_year


def age_group_range(code: str, current_year: int) -> AgeGroupDescriptor:
    """Resolve an age-group code to its birth-year window for ``current_year``."""

    normalized = (code or "").strip().upper()
    if normalized not in AGE_GROUP_CODES:
        raise InvalidParameter(
            "groupCode",
            f"Invalid age group code. Allowed: {', '.join(AGE_GROUP_CODES)}",
            {"allowed": list(AGE_GROUP_CODES)},
        )
    years = int(normalized[1:])
    if normalized in YOUTH_CODES:
        return AgeGroupDescriptor(normalized, current_year - years, current_year)
    return AgeGroupDescriptor(
        normalized,
        current_year - years - (SENIOR_WINDOW_YEARS - 1),
        current_year - years,
    )


def all_age_groups(current_year: int) -> Tuple[AgeGroupDescriptor, ...]:
    return tuple(age_group_range(code, current_year) for code in AGE_GROUP_CODES)


def derive_age(birth_year: Optional[str | int], current_year: int) -> Optional[int]:
    """Age reached in ``current_year``; ``None`` when the birth year is unknown."""

    if birth_year is None or birth_year == "":
        return None
    try:
        return current_year - int(birth_year)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class AgeBucket:
    lower: int
    upper: int
    group_label: str
    range_label: str

    def contains(self, age: int) -> bool:
        return self.lower <= age < self.upper


AGE_BUCKET_CEILING = 120

# (lower bound, group label, range label); each bucket ends at the next lower bound.
_BUCKET_TABLE: Tuple[Tuple[int, str, str], ...] = (
    (0, "U-8", "0-7 years"),
    (8, "U-10", "8-9 years"),
    (10, "U-12", "10-11 years"),
    (12, "U-14", "12-13 years"),
    (14, "U-16", "14-15 years"),
    (16, "U-18", "16-17 years"),
    (18, "U-20", "18-19 years"),
    (20, "U-21", "20 years"),
    (21, "Junior", "21-29 years"),
    (30, "Adult", "30-39 years"),
    (40, "40+", "40-49 years"),
    (50, "Senior-50+", "50-59 years"),
    (60, "Senior-60+", "60-69 years"),
    (70, "Senior-70+", "70-79 years"),
    (80, "Senior-80+", "80+ years"),
)


def _build_buckets() -> Tuple[AgeBucket, ...]:
    uppers = [lower for lower, _, _ in _BUCKET_TABLE[1:]] + [AGE_BUCKET_CEILING]
    return tuple(
        AgeBucket(lower=lower, upper=upper, group_label=group, range_label=label)
        for (lower, group, label), upper in zip(_BUCKET_TABLE, uppers)
    )


AGE_BUCKETS: Tuple[AgeBucket, ...] = _build_buckets()


def bucket_for_age(age: Optional[int]) -> Optional[AgeBucket]:
    """Statistics bucket for ``age``; ``None`` for unknown or out-of-range ages."""

    if age is None:
        return None
    for bucket in AGE_BUCKETS:
        if bucket.contains(age):
            return bucket
    return None


__all__ = [
    "AGE_BUCKETS",
    "AGE_GROUP_CODES",
    "AgeBucket",
    "AgeGroupDescriptor",
    "SENIOR_CODES",
    "YOUTH_CODES",
    "age_group_range",
    "all_age_groups",
    "bucket_for_age",
    "derive_age",
]
