"""Command-line interface for loading rating lists and printing reports."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from pyfide.config import Settings, iter_disciplines
from pyfide.config_loader import MappingProfile
from pyfide.errors import CatalogError
from pyfide.ingest import DEFAULT_PLAYERS_MAPPING, load_players_csv
from pyfide.service import PlayerCatalog
from pyfide.store import SqlitePlayerStore


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query and report on a chess rating list")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (default: PYFIDE_DB_PATH)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (e.g., INFO, DEBUG)")
    commands = parser.add_subparsers(dest="command", required=True)

    load = commands.add_parser("load", help="Replace the stored players with a CSV rating list")
    load.add_argument("csv", type=Path, help="Path to the players CSV")
    load.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for CSV columns (e.g., gender=sex)",
    )
    load.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    load.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    load.add_argument("--report", type=Path, default=None, help="Optional path to write the skipped-row report JSON")

    stats = commands.add_parser("stats", help="Print the overall statistics report")
    stats.add_argument("--include-inactive", action="store_true", help="Include inactive players")

    rankings = commands.add_parser("rankings", help="Print one page of a rating ranking")
    rankings.add_argument("discipline", choices=[d.key for d in iter_disciplines()])
    rankings.add_argument("--gender", default=None, help="M or F")
    rankings.add_argument("--federation", default=None, help="Federation code")
    rankings.add_argument("--age-group", default=None, help="Rank within an age group (e.g., U12, S50)")
    rankings.add_argument("--page", default=None, help="Zero-indexed page")
    rankings.add_argument("--size", default=None, help="Page size (1-100)")
    rankings.add_argument("--include-inactive", action="store_true", help="Include inactive players")

    age_groups = commands.add_parser("age-groups", help="Print per age-group statistics")
    age_groups.add_argument("--group", default=None, help="Single age-group code (default: all groups)")
    age_groups.add_argument("--rating-type", default="standard", help="standard, rapid or blitz")
    age_groups.add_argument("--gender", default=None, help="M or F")
    age_groups.add_argument("--include-inactive", action="store_true", help="Include inactive players")

    titles = commands.add_parser("titles", help="Print the title summary or one title category")
    titles.add_argument("--type", dest="title_type", default=None, help="Category (trainers, arbiters, gm, ...) or title code")

    args = parser.parse_args(argv)
    if args.command == "load":
        try:
            args.columns = _parse_mapping(args.column)
        except ValueError as exc:
            parser.error(str(exc))
    return args


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _emit(payload: Any) -> None:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    elif isinstance(payload, list):
        payload = [item.model_dump(mode="json", by_alias=True) for item in payload]
    print(json.dumps(payload, indent=2))


def _load(args: argparse.Namespace, store: SqlitePlayerStore) -> None:
    columns = args.columns
    if args.load_profile:
        columns = MappingProfile.load(args.load_profile).players_mapping | columns
    mapping = DEFAULT_PLAYERS_MAPPING | columns
    records, report = load_players_csv(args.csv, mapping=mapping)
    if args.save_profile:
        MappingProfile(columns).save(args.save_profile)
        print(f"Saved mapping profile to {args.save_profile}")
    store.replace_all(records)
    print(f"Loaded {report.loaded}/{report.total_rows} players into {store.db_path}")
    if report.skipped:
        preview = ", ".join(f"line {row.line} ({row.reason})" for row in report.skipped[:5])
        more = len(report.skipped) - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Skipped rows: {preview}{suffix}")
    if args.report:
        report_payload = {
            "total_rows": report.total_rows,
            "loaded": report.loaded,
            "skipped": [{"line": row.line, "reason": row.reason} for row in report.skipped],
        }
        args.report.write_text(json.dumps(report_payload, indent=2), encoding="utf-8")
        print(f"Wrote ingest report to {args.report}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    settings = Settings.from_env()
    store = SqlitePlayerStore(args.db or settings.db_path)
    catalog = PlayerCatalog(store, facet_workers=settings.facet_workers)

    try:
        if args.command == "load":
            _load(args, store)
        elif args.command == "stats":
            _emit(catalog.player_stats(include_inactive=args.include_inactive))
        elif args.command == "rankings":
            if args.age_group:
                _emit(catalog.rankings_by_age_group(args.age_group, args.gender, args.discipline, args.page, args.size))
            else:
                _emit(
                    catalog.rankings(
                        args.discipline,
                        args.gender,
                        args.federation,
                        args.page,
                        args.size,
                        include_inactive=args.include_inactive,
                    )
                )
        elif args.command == "age-groups":
            _emit(
                catalog.age_group_stats(
                    args.group,
                    rating_type=args.rating_type,
                    gender=args.gender,
                    include_inactive=args.include_inactive,
                )
            )
        elif args.command == "titles":
            if args.title_type:
                _emit(catalog.players_by_title_type(args.title_type))
            else:
                _emit(catalog.title_summary())
    except CatalogError as exc:
        logger.debug("Command %s failed", args.command, exc_info=exc)
        print(f"error: {exc.message}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
