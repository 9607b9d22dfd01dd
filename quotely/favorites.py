"""
Favorite and like state per (user, quote) pair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from quotely.db import DbClient, FavoriteRecord
from quotely.errors import AlreadyFavorited, NotFound

logger = logging.getLogger(__name__)


@dataclass
class LikeState:
    quote_id: int
    liked: bool
    like_count: int

    def as_dict(self) -> dict:
        return {
            "quote_id": self.quote_id,
            "liked": self.liked,
            "like_count": self.like_count,
        }


def _require_quote(db: DbClient, quote_id: int) -> None:
    if db.get_quote(quote_id) is None:
        raise NotFound(f"Quote {quote_id} not found")


def add_favorite(db: DbClient, user_id: str, quote_id: int) -> FavoriteRecord:
    """
    Move the pair from absent to present.

    Raises AlreadyFavorited when the pair is already present; no second row
    is written. Raises NotFound for an unknown quote.
    """
    _require_quote(db, quote_id)
    try:
        return db.create_favorite(user_id, quote_id)
    except AlreadyFavorited:
        logger.info("User %s already favorited quote %s", user_id, quote_id)
        raise


def remove_favorite(db: DbClient, user_id: str, quote_id: int) -> None:
    """Move the pair to absent. Removing an absent favorite is a no-op."""
    db.delete_favorite(user_id, quote_id)


def is_favorited(db: DbClient, user_id: str, quote_id: int) -> bool:
    return db.get_favorite(user_id, quote_id) is not None


def toggle_like(db: DbClient, user_id: str, quote_id: int) -> LikeState:
    """Like the quote if the user has not yet, otherwise unlike it."""
    _require_quote(db, quote_id)
    if db.has_like(user_id, quote_id):
        db.delete_like(user_id, quote_id)
        liked = False
    else:
        db.create_like(user_id, quote_id)
        liked = True
    return LikeState(
        quote_id=quote_id, liked=liked, like_count=db.count_likes([quote_id])
    )
