"""Offset/limit windows for paginated admin listings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

from sqlalchemy.orm import Query

# Largest page number accepted from a query string.
MAX_PAGE = 100_000
# LIMIT/OFFSET are bound as signed 64-bit integers by SQLite and Postgres.
MAX_WINDOW_VALUE = 2**63 - 1


@dataclass(frozen=True)
class PageWindow:
    """A ``(limit, offset)`` pair; both must be non-negative 64-bit integers."""

    limit: int
    offset: int = 0

    def __post_init__(self) -> None:
        for name in ("limit", "offset"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
            if value < 0:
                raise ValueError(f"{name} must be non-negative")
            if value > MAX_WINDOW_VALUE:
                raise ValueError(f"{name} is too large")

    @classmethod
    def for_page(cls, page: int, per_page: int) -> "PageWindow":
        page = min(max(page, 1), MAX_PAGE)
        return cls(limit=per_page, offset=(page - 1) * per_page)

    @property
    def page(self) -> int:
        if not self.limit:
            return 1
        return self.offset // self.limit + 1


def parse_page_arg(raw: Any) -> int:
    """Read a 1-based page number from a query argument.

    Bad input means page 1; anything above ``MAX_PAGE`` is capped.
    """
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    if page < 1:
        return 1
    return min(page, MAX_PAGE)


def page_controls(window: PageWindow, total_count: int) -> Dict[str, Any]:
    """Page numbers a template needs to render prev/next links.

    A window that starts past the end of the listing reports the last page
    and an empty item range.
    """
    pages = math.ceil(total_count / window.limit) if window.limit else 1
    pages = max(pages, 1)
    page = min(window.page, pages)
    past_end = window.offset >= total_count
    return {
        "page": page,
        "pages": pages,
        "per_page": window.limit,
        "total": total_count,
        "has_prev": page > 1,
        "has_next": page < pages and not past_end,
        "first_item": 0 if past_end else window.offset + 1,
        "last_item": 0 if past_end else min(window.offset + window.limit, total_count),
    }


def window_query(query: Query, window: PageWindow) -> tuple[list, int]:
    """Apply ``window`` to ``query``; return ``(items, total_count)``.

    The total ignores the window so callers can build page controls.
    """
    items = query.limit(window.limit).offset(window.offset).all()
    total = query.order_by(None).count()
    return items, total
