"""Page/size normalisation and the response pagination envelope."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from pyfide.models.reports import PaginationEnvelope


DEFAULT_PAGE = 0
DEFAULT_SIZE = 20
MIN_SIZE = 1
MAX_SIZE = 100


def _parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class PageRequest:
    """Zero-indexed page plus clamped page size."""

    page: int = DEFAULT_PAGE
    size: int = DEFAULT_SIZE

    @property
    def store_page(self) -> int:
        # The store is addressed one-indexed.
        return self.page + 1

    @property
    def skip(self) -> int:
        return (self.store_page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    def rank_offset(self) -> int:
        return self.page * self.size


def normalize_pagination(page: Any = None, size: Any = None) -> PageRequest:
    """Clamp raw inputs: page ≥ 0 (default 0), size in [1, 100] (default 20)."""

    page_value = _parse_int(page)
    size_value = _parse_int(size)
    page_num = max(0, page_value if page_value is not None else DEFAULT_PAGE)
    size_num = min(MAX_SIZE, max(MIN_SIZE, size_value if size_value is not None else DEFAULT_SIZE))
    return PageRequest(page=page_num, size=size_num)


def build_envelope(request: PageRequest, total_items: int) -> PaginationEnvelope:
    total = max(0, int(total_items))
    return PaginationEnvelope(
        page=request.page,
        size=request.size,
        total_items=total,
        total_pages=math.ceil(total / request.size),
        has_next=(request.page + 1) * request.size < total,
        has_previous=request.page > 0,
    )


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_SIZE",
    "MAX_SIZE",
    "MIN_SIZE",
    "PageRequest",
    "build_envelope",
    "normalize_pagination",
]
