"""
Daily and random single-row selection over an eligible collection.

Both picks address a row by its offset in the collection's natural
(insertion) order, so a pick moves when rows are inserted or deleted in
front of it.
"""

from __future__ import annotations

import random
from datetime import date, datetime
from typing import Callable, Optional, TypeVar
from zoneinfo import ZoneInfo

from quotely.db import DbClient, ProverbFilters, ProverbRecord, QuoteRecord

T = TypeVar("T")

_random = random.Random()


def today_in(tz_name: str = "UTC") -> date:
    """Calendar date in ``tz_name`` used to seed the daily pick."""
    return datetime.now(ZoneInfo(tz_name)).date()


def daily_seed(day: date) -> int:
    return day.year * 10000 + day.month * 100 + day.day


def daily_index(day: date, total: int) -> Optional[int]:
    """Offset of the daily pick, or None when the collection is empty."""
    if total <= 0:
        return None
    return daily_seed(day) % total


def random_index(total: int, rng: Optional[random.Random] = None) -> Optional[int]:
    if total <= 0:
        return None
    return (rng or _random).randrange(total)


def pick_daily(
    count: Callable[[], int], fetch_at: Callable[[int], Optional[T]], day: date
) -> Optional[T]:
    index = daily_index(day, count())
    if index is None:
        return None
    return fetch_at(index)


def pick_random(
    count: Callable[[], int],
    fetch_at: Callable[[int], Optional[T]],
    rng: Optional[random.Random] = None,
) -> Optional[T]:
    index = random_index(count(), rng)
    if index is None:
        return None
    return fetch_at(index)


def daily_quote(db: DbClient, day: date) -> Optional[QuoteRecord]:
    return pick_daily(db.count_quotes, db.quote_at, day)


def random_quote(db: DbClient, rng: Optional[random.Random] = None) -> Optional[QuoteRecord]:
    return pick_random(db.count_quotes, db.quote_at, rng)


def _count_approved_proverbs(db: DbClient) -> Callable[[], int]:
    return lambda: db.count_proverbs(ProverbFilters())


def daily_proverb(db: DbClient, day: date) -> Optional[ProverbRecord]:
    return pick_daily(_count_approved_proverbs(db), db.proverb_at, day)


def random_proverb(
    db: DbClient, rng: Optional[random.Random] = None
) -> Optional[ProverbRecord]:
    return pick_random(_count_approved_proverbs(db), db.proverb_at, rng)
