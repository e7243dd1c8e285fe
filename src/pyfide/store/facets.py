"""Reference evaluation of sorting and facet specifications over records."""

from __future__ import annotations

from statistics import fmean
from typing import Any, Dict, Iterable, List, Sequence

from pyfide.classify.age import bucket_for_age, derive_age
from pyfide.models.player import PlayerRecord
from pyfide.query.predicates import matches
from pyfide.query.ranking import SortSpec

from .base import Accumulator, AgeBuckets, Count, CountIf, FacetRow, FacetSpec, Mean


_SKIP = object()


def sort_records(records: Iterable[PlayerRecord], sort: SortSpec) -> List[PlayerRecord]:
    """Stable multi-key sort; missing values always sort last."""

    ordered = list(records)
    for key in reversed(sort):
        present = [record for record in ordered if getattr(record, key.field) is not None]
        missing = [record for record in ordered if getattr(record, key.field) is None]
        present.sort(key=lambda record: getattr(record, key.field), reverse=key.descending)
        ordered = present + missing
    return ordered


def _group_key(record: PlayerRecord, member: Any, spec: FacetSpec) -> Any:
    if spec.group_by is None:
        return None
    if isinstance(spec.group_by, AgeBuckets):
        bucket = bucket_for_age(derive_age(record.birth_year, spec.group_by.reference_year))
        return bucket.lower if bucket is not None else _SKIP
    if spec.unwind is not None and spec.group_by == spec.unwind:
        return member
    return getattr(record, spec.group_by)


def _accumulate(accumulator: Accumulator, rows: Sequence[PlayerRecord]) -> Any:
    if isinstance(accumulator, Count):
        return len(rows)
    if isinstance(accumulator, Mean):
        values = [getattr(row, accumulator.field) for row in rows if getattr(row, accumulator.field)]
        return fmean(values) if values else None
    if isinstance(accumulator, CountIf):
        return sum(1 for row in rows if matches(row, accumulator.where))
    raise TypeError(f"Unsupported accumulator {accumulator!r}")


def _key_order(key: Any) -> tuple:
    if key is None:
        return (1, 0, "")
    if isinstance(key, (int, float)):
        return (0, 0, key)
    return (0, 1, str(key))


def run_facet(records: Iterable[PlayerRecord], spec: FacetSpec) -> List[FacetRow]:
    """Evaluate one facet: filter, unwind, group, accumulate, sort, limit."""

    rows = (record for record in records if matches(record, spec.where))
    groups: Dict[Any, List[PlayerRecord]] = {}
    for record in rows:
        members = getattr(record, spec.unwind) if spec.unwind else (None,)
        for member in members:
            key = _group_key(record, member, spec)
            if key is _SKIP:
                continue
            groups.setdefault(key, []).append(record)

    if spec.group_by is None and not groups:
        groups[None] = []

    result = [
        FacetRow(key, {name: _accumulate(acc, members) for name, acc in spec.accumulators})
        for key, members in groups.items()
    ]
    if spec.sort_by is not None:
        sort_name = spec.sort_by
        result.sort(key=lambda row: (-(row.get(sort_name) or 0), _key_order(row.key)))
    else:
        result.sort(key=lambda row: _key_order(row.key))
    if spec.limit is not None:
        result = result[: spec.limit]
    return result


__all__ = ["run_facet", "sort_records"]
