"""Page/limit parsing and page metadata for list endpoints."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, TypeVar

from .schemas import MAX_ID

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# keeps (page - 1) * limit inside a SQLite INTEGER; anything past it is an empty page
MAX_PAGE = MAX_ID // MAX_LIMIT


def _positive_int(value: Any, default: int, ceiling: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed <= 0:
        return default
    return min(parsed, ceiling)


def parse_page_params(page: Optional[Any], limit: Optional[Any]) -> tuple[int, int]:
    """Return (page, limit); absent, non-numeric or non-positive values fall back to 1/10.

    Oversized values are clamped to MAX_PAGE / MAX_LIMIT.
    """

    return (
        _positive_int(page, DEFAULT_PAGE, MAX_PAGE),
        _positive_int(limit, DEFAULT_LIMIT, MAX_LIMIT),
    )


@dataclass(frozen=True)
class Pagination:
    current_page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.limit

    def as_dict(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
            "nextPage": self.current_page + 1,
            "prevPage": self.current_page - 1,
            "limit": self.limit,
            "totalEmployees": self.total,
        }


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    pagination: Pagination
