"""Input adapters that normalize raw rating-list data."""

from .players import (
    DEFAULT_PLAYERS_MAPPING,
    IngestReport,
    PlayerRow,
    SkippedRow,
    load_player_rows,
    load_players_csv,
    rows_to_records,
)

__all__ = [
    "DEFAULT_PLAYERS_MAPPING",
    "IngestReport",
    "PlayerRow",
    "SkippedRow",
    "load_player_rows",
    "load_players_csv",
    "rows_to_records",
]
