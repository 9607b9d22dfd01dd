"""
Paginated, filtered listings.

Counts and rows are two independent reads against the same filter, so the
total can disagree with the rows under concurrent writes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from quotely.db import DbClient, ProverbFilters, QuoteFilters
from quotely.errors import InvalidRequest

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total: int
    pages: int = field(init=False)

    def __post_init__(self):
        self.pages = math.ceil(self.total / self.limit) if self.total else 0

    def pagination(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
        }


def page_offset(page: int, limit: int) -> int:
    """Return the row offset of ``page`` (1-based) at ``limit`` rows per page."""
    if page < 1:
        raise InvalidRequest("page must be >= 1")
    if limit < 1:
        raise InvalidRequest("limit must be >= 1")
    return (page - 1) * limit


def list_quotes(
    db: DbClient, page: int = 1, limit: int = 20, filters: Optional[QuoteFilters] = None
) -> Page:
    offset = page_offset(page, limit)
    total = db.count_quotes(filters)
    items = db.list_quotes(filters, offset=offset, limit=limit) if offset < total else []
    return Page(items=items, page=page, limit=limit, total=total)


def list_proverbs(
    db: DbClient, page: int = 1, limit: int = 20, filters: Optional[ProverbFilters] = None
) -> Page:
    offset = page_offset(page, limit)
    total = db.count_proverbs(filters)
    items = db.list_proverbs(filters, offset=offset, limit=limit) if offset < total else []
    return Page(items=items, page=page, limit=limit, total=total)


def list_user_quotes(db: DbClient, user_id: str, page: int = 1, limit: int = 20) -> Page:
    return list_quotes(db, page, limit, QuoteFilters(submitted_by=user_id))


def list_user_favorites(
    db: DbClient, user_id: str, page: int = 1, limit: int = 20
) -> Page:
    offset = page_offset(page, limit)
    total = db.count_favorites(user_id)
    items = db.list_favorites(user_id, offset=offset, limit=limit) if offset < total else []
    return Page(items=items, page=page, limit=limit, total=total)
