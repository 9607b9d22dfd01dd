"""
Dashboard statistics, trending ranking and per-user stats.
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from quotely.db import DbClient, ProverbFilters, QuoteFilters, QuoteRecord
from quotely.errors import DashboardUnavailable, StoreError

logger = logging.getLogger(__name__)

TRENDING_WINDOW = 50
TRENDING_LIMIT = 10


@dataclass
class TrendingQuote:
    quote: QuoteRecord
    like_count: int

    def as_dict(self) -> dict:
        payload = self.quote.as_dict()
        payload["like_count"] = self.like_count
        return payload


@dataclass
class DashboardStats:
    total_quotes: int = 0
    total_users: int = 0
    total_favorites: int = 0
    total_proverbs: int = 0
    user_favorites: int = 0
    user_quotes: int = 0

    def as_dict(self) -> dict:
        return {
            "total_quotes": self.total_quotes,
            "total_users": self.total_users,
            "total_favorites": self.total_favorites,
            "total_proverbs": self.total_proverbs,
            "user_favorites": self.user_favorites,
            "user_quotes": self.user_quotes,
        }


@dataclass
class UserStats:
    favorites_count: int
    submitted_quotes: int
    total_likes_received: int

    def as_dict(self) -> dict:
        return {
            "favorites_count": self.favorites_count,
            "submitted_quotes": self.submitted_quotes,
            "total_likes_received": self.total_likes_received,
        }


def trending_quotes(
    db: DbClient, window: int = TRENDING_WINDOW, limit: int = TRENDING_LIMIT
) -> list[TrendingQuote]:
    """
    Rank the ``window`` newest quotes by like count and return the top ``limit``.

    Only the recent window is ranked, never the whole collection. Ties keep
    recency order (newest first) because the sort is stable.
    """
    recent = db.list_quotes(offset=0, limit=window)
    if not recent:
        return []
    like_counts = Counter(db.like_quote_ids([quote.id for quote in recent]))
    ranked = sorted(
        (TrendingQuote(quote=q, like_count=like_counts.get(q.id, 0)) for q in recent),
        key=lambda item: item.like_count,
        reverse=True,
    )
    return ranked[:limit]


def dashboard_stats(
    db: DbClient, user_id: Optional[str] = None, *, max_workers: int = 6
) -> DashboardStats:
    """
    Run the dashboard counts concurrently and join them.

    Fails closed: if any count raises, DashboardUnavailable is raised listing
    every failed count. User-scoped counts are skipped without a user id.
    """
    counts: dict[str, Callable[[], int]] = {
        "total_quotes": lambda: db.count_quotes(),
        "total_users": db.count_profiles,
        "total_favorites": lambda: db.count_favorites(),
        "total_proverbs": lambda: db.count_proverbs(ProverbFilters(include_unapproved=True)),
    }
    if user_id:
        counts["user_favorites"] = lambda: db.count_favorites(user_id)
        counts["user_quotes"] = lambda: db.count_quotes(QuoteFilters(submitted_by=user_id))

    results: dict[str, int] = {}
    failed: list[str] = []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {name: pool.submit(fn) for name, fn in counts.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except StoreError:
                logger.exception("Dashboard count %s failed", name)
                failed.append(name)

    if failed:
        raise DashboardUnavailable(failed)
    return DashboardStats(**results)


def user_stats(db: DbClient, user_id: str) -> UserStats:
    quote_ids = db.quote_ids_by_submitter(user_id)
    return UserStats(
        favorites_count=db.count_favorites(user_id),
        submitted_quotes=len(quote_ids),
        total_likes_received=db.count_likes(quote_ids) if quote_ids else 0,
    )


def table_health(db: DbClient) -> dict:
    """Per-table availability and row counts. A failing table reports False/0."""
    probes: dict[str, Callable[[], int]] = {
        "quotes": lambda: db.count_quotes(),
        "proverbs": lambda: db.count_proverbs(ProverbFilters(include_unapproved=True)),
        "users": db.count_profiles,
        "favorites": lambda: db.count_favorites(),
    }
    tables: dict[str, bool] = {}
    counts: dict[str, int] = {}
    for name, probe in probes.items():
        try:
            counts[name] = probe()
            tables[name] = True
        except StoreError as exc:
            logger.warning("Health probe for %s failed: %s", name, exc)
            counts[name] = 0
            tables[name] = False
    return {"tables": tables, "counts": counts}
