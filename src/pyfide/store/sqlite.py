"""SQLite-backed player store.

Filters are compiled to SQL; title sets are stored as JSON arrays and queried
with the JSON1 functions. Facets compile to aggregate queries and a single
``aggregate_facets`` call reads all of its specs in one transaction.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

from pyfide.classify.age import AGE_BUCKETS, AGE_BUCKET_CEILING
from pyfide.errors import StoreFailure
from pyfide.models.player import TITLE_SET_FIELDS, PlayerRecord
from pyfide.query.predicates import (
    NUMERIC_TEXT_FIELDS,
    SET_FIELDS,
    Contains,
    Equals,
    Filter,
    InSet,
    NonEmpty,
    Predicate,
    Range,
)
from pyfide.query.ranking import SortSpec

from .base import AgeBuckets, Accumulator, Count, CountIf, FacetResults, FacetRow, FacetSpec, Mean


logger = logging.getLogger(__name__)

_INTEGER_COLUMNS = (
    "standard_rating",
    "rapid_rating",
    "blitz_rating",
    "standard_games",
    "rapid_games",
    "blitz_games",
    "standard_k",
    "rapid_k",
    "blitz_k",
)
_COLUMNS: Tuple[str, ...] = (
    "id",
    "name",
    "federation",
    "gender",
    *TITLE_SET_FIELDS,
    *_INTEGER_COLUMNS,
    "birth_year",
    "activity_flag",
)


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


def _py_lower(value: Any) -> Any:
    # SQLite's lower() only folds ASCII.
    return value.lower() if isinstance(value, str) else value


def _compile_set_predicate(column: str, predicate: Predicate) -> Tuple[str, List[Any]]:
    if isinstance(predicate, Equals):
        return (
            f"EXISTS (SELECT 1 FROM json_each(players.{column}) WHERE json_each.value = ?)",
            [predicate.value],
        )
    if isinstance(predicate, InSet):
        if not predicate.values:
            return "0", []
        return (
            f"EXISTS (SELECT 1 FROM json_each(players.{column}) "
            f"WHERE json_each.value IN ({_placeholders(len(predicate.values))}))",
            list(predicate.values),
        )
    if isinstance(predicate, NonEmpty):
        return f"json_array_length(players.{column}) > 0", []
    raise TypeError(f"Predicate {predicate!r} is not supported on set field {column!r}")


def _compile_scalar_predicate(field: str, predicate: Predicate) -> Tuple[str, List[Any]]:
    column = f"players.{field}"
    if isinstance(predicate, Equals):
        if predicate.value is None:
            return f"{column} IS NULL", []
        return f"{column} = ?", [predicate.value]
    if isinstance(predicate, InSet):
        values = [value for value in predicate.values if value is not None]
        clauses = []
        if None in predicate.values:
            clauses.append(f"{column} IS NULL")
        if values:
            clauses.append(f"{column} IN ({_placeholders(len(values))})")
        if not clauses:
            return "0", []
        return "(" + " OR ".join(clauses) + ")", values
    if isinstance(predicate, Range):
        expr = f"CAST({column} AS INTEGER)" if field in NUMERIC_TEXT_FIELDS else column
        clauses = [f"{column} IS NOT NULL"]
        params: List[Any] = []
        if predicate.gte is not None:
            clauses.append(f"{expr} >= ?")
            params.append(predicate.gte)
        if predicate.lte is not None:
            clauses.append(f"{expr} <= ?")
            params.append(predicate.lte)
        return "(" + " AND ".join(clauses) + ")", params
    if isinstance(predicate, NonEmpty):
        return f"({column} IS NOT NULL AND {column} != '')", []
    if isinstance(predicate, Contains):
        return f"instr(py_lower({column}), ?) > 0", [predicate.text.lower()]
    raise TypeError(f"Unsupported predicate {predicate!r}")


def compile_filter(criteria: Filter) -> Tuple[str, List[Any]]:
    """Compile a filter to a WHERE expression and its parameters."""

    parts: List[str] = []
    params: List[Any] = []
    for field, predicate in criteria.clauses:
        if field not in _COLUMNS:
            raise ValueError(f"Unknown column {field!r}")
        if field in SET_FIELDS:
            sql, values = _compile_set_predicate(field, predicate)
        else:
            sql, values = _compile_scalar_predicate(field, predicate)
        parts.append(sql)
        params.extend(values)
    for sub in criteria.all_of:
        sql, values = compile_filter(sub)
        parts.append(f"({sql})")
        params.extend(values)
    if criteria.any_of:
        alternatives = []
        for sub in criteria.any_of:
            sql, values = compile_filter(sub)
            alternatives.append(f"({sql})")
            params.extend(values)
        parts.append("(" + " OR ".join(alternatives) + ")")
    return (" AND ".join(parts) if parts else "1 = 1"), params


def compile_sort(sort: SortSpec) -> str:
    terms = []
    for key in sort:
        if key.field not in _COLUMNS:
            raise ValueError(f"Unknown sort column {key.field!r}")
        direction = "DESC" if key.descending else "ASC"
        terms.append(f"{key.field} IS NULL, {key.field} {direction}")
    terms.append("rowid ASC")
    return ", ".join(terms)


def _age_bucket_expression(grouping: AgeBuckets) -> str:
    age = f"({int(grouping.reference_year)} - CAST(players.birth_year AS INTEGER))"
    whens = " ".join(f"WHEN {age} < {bucket.upper} THEN {bucket.lower}" for bucket in AGE_BUCKETS)
    # NULL ages fall through every branch.
    return f"CASE WHEN {age} < 0 OR {age} >= {AGE_BUCKET_CEILING} THEN NULL {whens} ELSE NULL END"


def _group_expression(spec: FacetSpec) -> str:
    if spec.group_by is None:
        return "NULL"
    if isinstance(spec.group_by, AgeBuckets):
        return _age_bucket_expression(spec.group_by)
    if spec.unwind is not None and spec.group_by == spec.unwind:
        return "unwound.value"
    if spec.group_by not in _COLUMNS:
        raise ValueError(f"Unknown group column {spec.group_by!r}")
    return f"players.{spec.group_by}"


def _compile_accumulator(accumulator: Accumulator) -> Tuple[str, List[Any]]:
    if isinstance(accumulator, Count):
        return "COUNT(*)", []
    if isinstance(accumulator, Mean):
        if accumulator.field not in _INTEGER_COLUMNS:
            raise ValueError(f"Cannot average column {accumulator.field!r}")
        return f"AVG(NULLIF(players.{accumulator.field}, 0))", []
    if isinstance(accumulator, CountIf):
        sql, params = compile_filter(accumulator.where)
        return f"COALESCE(SUM(CASE WHEN {sql} THEN 1 ELSE 0 END), 0)", params
    raise TypeError(f"Unsupported accumulator {accumulator!r}")


def compile_facet(spec: FacetSpec) -> Tuple[str, List[Any]]:
    """Compile a facet to one aggregate query.

    Result columns are the group key followed by the accumulators in
    declaration order. Ordering matches ``run_facet``: the ``sort_by``
    accumulator descending (missing as zero), then the key with NULL last.
    """

    params: List[Any] = []
    columns = [f"{_group_expression(spec)} AS group_key"]
    for index, (_, accumulator) in enumerate(spec.accumulators):
        sql, values = _compile_accumulator(accumulator)
        columns.append(f"{sql} AS acc_{index}")
        params.extend(values)

    source = "players"
    if spec.unwind is not None:
        if spec.unwind not in SET_FIELDS:
            raise ValueError(f"Cannot unwind column {spec.unwind!r}")
        source = f"players, json_each(players.{spec.unwind}) AS unwound"

    where, where_params = compile_filter(spec.where)
    params.extend(where_params)
    inner = f"SELECT {', '.join(columns)} FROM {source} WHERE {where}"
    if spec.group_by is not None:
        inner += " GROUP BY group_key"

    outer = f"SELECT * FROM ({inner})"
    if isinstance(spec.group_by, AgeBuckets):
        outer += " WHERE group_key IS NOT NULL"
    order = ["group_key IS NULL", "group_key ASC"]
    if spec.sort_by is not None:
        names = [name for name, _ in spec.accumulators]
        if spec.sort_by not in names:
            raise ValueError(f"Unknown sort accumulator {spec.sort_by!r}")
        order.insert(0, f"COALESCE(acc_{names.index(spec.sort_by)}, 0) DESC")
    outer += " ORDER BY " + ", ".join(order)
    if spec.limit is not None:
        outer += " LIMIT ?"
        params.append(spec.limit)
    return outer, params


class SqlitePlayerStore:
    """Persistent store for the player population."""

    def __init__(self, db_path: Path | str):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path: Path | str = db_path if self._use_uri else Path(db_path)
        self._ensure_schema()
        logger.info("Player store ready at %s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.Error as exc:
            raise StoreFailure("Unable to open player store", {"error": str(exc)}) from exc
        conn.row_factory = sqlite3.Row
        conn.create_function("py_lower", 1, _py_lower, deterministic=True)
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreFailure("Player store query failed", {"error": str(exc)}) from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS players (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    federation TEXT NOT NULL,
                    gender TEXT NOT NULL,
                    titles TEXT NOT NULL DEFAULT '[]',
                    women_titles TEXT NOT NULL DEFAULT '[]',
                    other_titles TEXT NOT NULL DEFAULT '[]',
                    additional_designations TEXT NOT NULL DEFAULT '[]',
                    standard_rating INTEGER NOT NULL DEFAULT 0,
                    rapid_rating INTEGER NOT NULL DEFAULT 0,
                    blitz_rating INTEGER NOT NULL DEFAULT 0,
                    standard_games INTEGER NOT NULL DEFAULT 0,
                    rapid_games INTEGER NOT NULL DEFAULT 0,
                    blitz_games INTEGER NOT NULL DEFAULT 0,
                    standard_k INTEGER NOT NULL DEFAULT 0,
                    rapid_k INTEGER NOT NULL DEFAULT 0,
                    blitz_k INTEGER NOT NULL DEFAULT 0,
                    birth_year TEXT,
                    activity_flag TEXT
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_players_federation ON players (federation)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_players_standard ON players (standard_rating DESC)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_players_birth_year ON players (birth_year)")

    def replace_all(self, records: Iterable[PlayerRecord]) -> int:
        """Replace the stored population; returns the number of rows written."""

        rows = [self._record_to_row(record) for record in records]
        with self._connect() as conn:
            conn.execute("DELETE FROM players")
            conn.executemany(
                f"INSERT INTO players ({', '.join(_COLUMNS)}) VALUES ({_placeholders(len(_COLUMNS))})",
                rows,
            )
        logger.info("Loaded %s players into %s", len(rows), self.db_path)
        return len(rows)

    def _query(
        self,
        criteria: Filter,
        sort: SortSpec = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[PlayerRecord]:
        where, params = compile_filter(criteria)
        sql = f"SELECT * FROM players WHERE {where} ORDER BY {compile_sort(sort)} LIMIT ? OFFSET ?"
        with self._connect() as conn:
            rows = conn.execute(sql, (*params, -1 if limit is None else limit, skip)).fetchall()
        return [self._row_to_record(row) for row in rows]

    def find_one(self, criteria: Filter) -> Optional[PlayerRecord]:
        found = self._query(criteria, limit=1)
        return found[0] if found else None

    def find_many(
        self,
        criteria: Filter,
        sort: SortSpec = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[PlayerRecord]:
        return self._query(criteria, sort, skip, limit)

    def count(self, criteria: Filter) -> int:
        where, params = compile_filter(criteria)
        with self._connect() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM players WHERE {where}", params).fetchone()
        return int(row[0])

    def aggregate_facets(self, specs: Sequence[FacetSpec]) -> FacetResults:
        """Evaluate every spec in SQL inside one read transaction."""

        results: FacetResults = {}
        with self._connect() as conn:
            conn.execute("BEGIN")
            for spec in specs:
                sql, params = compile_facet(spec)
                rows = conn.execute(sql, params).fetchall()
                results[spec.name] = [
                    FacetRow(row[0], {name: row[index + 1] for index, (name, _) in enumerate(spec.accumulators)})
                    for row in rows
                ]
        return results

    @staticmethod
    def _record_to_row(record: PlayerRecord) -> tuple:
        data = record.model_dump()
        return tuple(
            json.dumps(list(data[column])) if column in SET_FIELDS else data[column]
            for column in _COLUMNS
        )

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> PlayerRecord:
        data = {column: row[column] for column in _COLUMNS}
        for column in TITLE_SET_FIELDS:
            data[column] = tuple(json.loads(data[column] or "[]"))
        return PlayerRecord.model_validate(data)
