"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, HTTPException

from quotely.config import get_settings
from quotely.db import DbClient, InMemoryDbClient, PostgresDbClient
from quotely.sample_data import seed_sample_data

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so in-memory state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("Using in-memory database backend")
        _db_client = InMemoryDbClient()
        if settings.seed_sample_data:
            seed_sample_data(_db_client)
    else:
        logger.info("Using SQL database backend")
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> str:
    """Caller identity, resolved by the upstream auth layer."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id
