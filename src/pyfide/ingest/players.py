"""Load player rating-list CSVs and emit canonical records."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError

from pyfide.models.player import PlayerRecord


logger = logging.getLogger(__name__)

# Record field -> CSV column, matching the rating-list export layout.
DEFAULT_PLAYERS_MAPPING: Dict[str, str] = {
    "id": "id_number",
    "name": "name",
    "federation": "federation",
    "gender": "sex",
    "titles": "title",
    "women_titles": "w_title",
    "other_titles": "o_title",
    "additional_designations": "foa",
    "standard_rating": "standard_rating",
    "standard_games": "standard_games",
    "standard_k": "sk",
    "rapid_rating": "rapid_rating",
    "rapid_games": "rapid_games",
    "rapid_k": "rk",
    "blitz_rating": "blitz_rating",
    "blitz_games": "blitz_games",
    "blitz_k": "bk",
    "birth_year": "birthday",
    "activity_flag": "flag",
}

_TITLE_FIELDS = ("titles", "women_titles", "other_titles", "additional_designations")
_INT_FIELDS = (
    "standard_rating",
    "standard_games",
    "standard_k",
    "rapid_rating",
    "rapid_games",
    "rapid_k",
    "blitz_rating",
    "blitz_games",
    "blitz_k",
)
_TITLE_SPLIT = re.compile(r"[\s,;]+")


class PlayerRow(BaseModel):
    """One CSV row, still as raw text, keyed by record field name."""

    line: int
    values: Dict[str, Optional[str]]

    @classmethod
    def from_mapping(cls, line: int, row: Mapping[str, Optional[str]], mapping: Mapping[str, str]) -> "PlayerRow":
        values: Dict[str, Optional[str]] = {}
        for key, column in mapping.items():
            raw = row.get(column)
            values[key] = raw.strip() if isinstance(raw, str) else None
        return cls(line=line, values=values)


@dataclass
class SkippedRow:
    line: int
    reason: str


@dataclass
class IngestReport:
    total_rows: int = 0
    loaded: int = 0
    skipped: List[SkippedRow] = field(default_factory=list)


def _split_titles(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(token.upper() for token in _TITLE_SPLIT.split(raw) if token)


def _parse_int(raw: Optional[str]) -> int:
    if raw is None or raw == "":
        return 0
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        raise ValueError(f"'{raw}' is not numeric") from None


def row_to_record(row: PlayerRow) -> PlayerRecord:
    data: Dict[str, object] = {}
    for key, raw in row.values.items():
        if key in _TITLE_FIELDS:
            data[key] = _split_titles(raw)
        elif key in _INT_FIELDS:
            data[key] = _parse_int(raw)
        elif key == "gender":
            data[key] = (raw or "").upper()
        else:
            data[key] = raw or None
    return PlayerRecord.model_validate(data)


def load_player_rows(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[PlayerRow]:
    mapping = mapping or DEFAULT_PLAYERS_MAPPING
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        # Line 1 is the header.
        return [PlayerRow.from_mapping(line, row, mapping) for line, row in enumerate(reader, start=2)]


def rows_to_records(rows: List[PlayerRow]) -> Tuple[List[PlayerRecord], IngestReport]:
    report = IngestReport(total_rows=len(rows))
    records: List[PlayerRecord] = []
    seen: set[str] = set()
    for row in rows:
        try:
            record = row_to_record(row)
        except (ValidationError, ValueError) as exc:
            reason = str(exc).splitlines()[0]
            if isinstance(exc, ValidationError) and exc.errors():
                first = exc.errors()[0]
                location = ".".join(str(part) for part in first["loc"])
                reason = f"{location}: {first['msg']}"
            report.skipped.append(SkippedRow(row.line, reason))
            continue
        if record.id in seen:
            report.skipped.append(SkippedRow(row.line, f"duplicate id {record.id}"))
            continue
        seen.add(record.id)
        records.append(record)
    report.loaded = len(records)
    if report.skipped:
        logger.warning("Skipped %s of %s player rows", len(report.skipped), report.total_rows)
    return records, report


def load_players_csv(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[PlayerRecord], IngestReport]:
    """Read ``path`` into validated records plus a report of skipped rows."""

    records, report = rows_to_records(load_player_rows(Path(path), mapping=mapping))
    logger.info("Loaded %s players from %s", report.loaded, path)
    return records, report


__all__ = [
    "DEFAULT_PLAYERS_MAPPING",
    "IngestReport",
    "PlayerRow",
    "SkippedRow",
    "load_player_rows",
    "load_players_csv",
    "row_to_record",
    "rows_to_records",
]
