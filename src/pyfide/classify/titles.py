"""Title categories: trainers, arbiters, organizers and competitive titles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from pyfide.errors import InvalidParameter
from pyfide.models.player import PlayerRecord


TRAINER_CODES: Tuple[str, ...] = ("FST", "FT", "SI", "NI", "DI")
ARBITER_CODES: Tuple[str, ...] = ("IA", "FA", "NA")
COMPETITIVE_CODES: Tuple[str, ...] = ("GM", "WGM", "IM", "WIM", "FM", "WFM", "CM", "WCM")

# Trainer and arbiter codes only ever appear in ``other_titles``.
GROUPED_CATEGORIES: Mapping[str, Tuple[str, ...]] = {
    "trainers": TRAINER_CODES,
    "arbiters": ARBITER_CODES,
}

TITLE_CATEGORIES: Mapping[str, Tuple[str, ...]] = {
    **GROUPED_CATEGORIES,
    "gm": ("GM",),
    "wgm": ("WGM",),
    "im": ("IM",),
    "wim": ("WIM",),
    "fm": ("FM",),
    "wfm": ("WFM",),
}

_PRIORITY: Tuple[str, ...] = TRAINER_CODES + ARBITER_CODES + COMPETITIVE_CODES


@dataclass(frozen=True)
class TitleCategory:
    key: str
    codes: Tuple[str, ...]

    @property
    def is_grouped(self) -> bool:
        return self.key in GROUPED_CATEGORIES


@dataclass(frozen=True)
class TitleProfile:
    trainer_codes: Tuple[str, ...]
    arbiter_codes: Tuple[str, ...]
    is_organizer: bool
    competitive_codes: Tuple[str, ...]

    @property
    def is_trainer(self) -> bool:
        return bool(self.trainer_codes)

    @property
    def is_arbiter(self) -> bool:
        return bool(self.arbiter_codes)

    @property
    def is_competitive(self) -> bool:
        return bool(self.competitive_codes)

    @property
    def primary_title(self) -> Optional[str]:
        for codes in (self.trainer_codes, self.arbiter_codes, self.competitive_codes):
            if codes:
                return codes[0]
        return None


def held_codes(record: PlayerRecord) -> Tuple[str, ...]:
    """Union of the three title sets, in first-seen order."""

    seen: Dict[str, None] = {}
    for code in (*record.titles, *record.women_titles, *record.other_titles):
        seen.setdefault(code, None)
    return tuple(seen)


def _ordered_matches(held: Iterable[str], codes: Sequence[str]) -> Tuple[str, ...]:
    held_set = set(held)
    return tuple(code for code in codes if code in held_set)


def classify_titles(record: PlayerRecord) -> TitleProfile:
    return TitleProfile(
        trainer_codes=_ordered_matches(record.other_titles, TRAINER_CODES),
        arbiter_codes=_ordered_matches(record.other_titles, ARBITER_CODES),
        is_organizer=bool(record.additional_designations),
        competitive_codes=_ordered_matches(held_codes(record), COMPETITIVE_CODES),
    )


def primary_title(record: PlayerRecord, candidates: Sequence[str]) -> Optional[str]:
    """First code of ``candidates`` the record holds, trainer → arbiter → competitive first."""

    held = set(held_codes(record))
    candidate_set = set(candidates)
    for code in _PRIORITY:
        if code in candidate_set and code in held:
            return code
    for code in candidates:
        if code in held:
            return code
    return None


def resolve_title_category(key: Optional[str]) -> TitleCategory:
    """Map a category key (or a single arbitrary title code) to its codes."""

    if key is None or not str(key).strip():
        raise InvalidParameter("type", "Title type is required")
    raw = str(key).strip()
    normalized = raw.lower()
    if normalized in TITLE_CATEGORIES:
        return TitleCategory(normalized, TITLE_CATEGORIES[normalized])
    return TitleCategory(raw, (raw.upper(),))


def other_title_breakdown(records: Iterable[PlayerRecord], codes: Sequence[str]) -> Dict[str, int]:
    """Count holders of each code within ``other_titles``."""

    breakdown = {code: 0 for code in codes}
    for record in records:
        for code in codes:
            if code in record.other_titles:
                breakdown[code] += 1
    return breakdown


__all__ = [
    "ARBITER_CODES",
    "COMPETITIVE_CODES",
    "TITLE_CATEGORIES",
    "TRAINER_CODES",
    "TitleCategory",
    "TitleProfile",
    "classify_titles",
    "held_codes",
    "other_title_breakdown",
    "primary_title",
    "resolve_title_category",
]
