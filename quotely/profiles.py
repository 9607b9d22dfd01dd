"""
User profile lookup and partial updates.
"""

from __future__ import annotations

import logging
from typing import Optional

from quotely.db import DbClient, UserProfileRecord
from quotely.errors import NotFound

logger = logging.getLogger(__name__)


def default_username(user_id: str) -> str:
    return f"user_{user_id[:8]}"


def get_or_create_profile(db: DbClient, user_id: str) -> tuple[UserProfileRecord, bool]:
    """Return the profile and whether it was created by this call."""
    profile = db.get_profile(user_id)
    if profile:
        return profile, False
    profile = db.create_profile(user_id, default_username(user_id))
    logger.info("Created profile for user %s", user_id)
    return profile, True


def update_profile(
    db: DbClient,
    user_id: str,
    *,
    username: Optional[str] = None,
    avatar_url: Optional[str] = None,
    bio: Optional[str] = None,
) -> UserProfileRecord:
    """
    Apply a partial update. Empty username/avatar values are ignored; bio
    may be cleared with an empty string. ``updated_at`` always moves.
    """
    updates: dict = {}
    if username:
        updates["username"] = username
    if avatar_url:
        updates["avatar_url"] = avatar_url
    if bio is not None:
        updates["bio"] = bio
    profile = db.update_profile(user_id, updates)
    if profile is None:
        raise NotFound(f"Profile {user_id} not found")
    return profile
