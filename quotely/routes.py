"""
HTTP routes for the Quotely API.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from quotely import aggregation, favorites, listing, profiles, selection
from quotely.config import Settings, get_settings
from quotely.db import DbClient, ProverbFilters, QuoteFilters, STATUS_APPROVED, STATUS_PENDING
from quotely.dependencies import get_current_user_id, get_db_client
from quotely.errors import StoreError
from quotely.schemas import (
    ApiResponse,
    FavoriteCheckResponse,
    FavoriteCreate,
    ProfileUpdate,
    ProverbCreate,
    QuoteCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@contextmanager
def _store_errors(failure: str):
    """Log store failures and answer 500 with ``failure`` as the error."""
    try:
        yield
    except StoreError:
        logger.exception(failure)
        raise HTTPException(status_code=500, detail=failure)


def _page_response(page: listing.Page) -> ApiResponse:
    return ApiResponse(
        success=True,
        data=[item.as_dict() for item in page.items],
        pagination=page.pagination(),
    )


def _pick_response(item, empty_message: str) -> ApiResponse:
    if item is None:
        return ApiResponse(success=True, data=None, message=empty_message)
    return ApiResponse(success=True, data=item.as_dict())


def _page_params(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
) -> tuple[int, int]:
    size = limit or settings.default_page_size
    return page, min(size, settings.max_page_size)


@router.get("/health")
def health(db: DbClient = Depends(get_db_client)):
    try:
        db.count_quotes()
        connected = True
    except StoreError as exc:
        logger.warning("Database connectivity check failed: %s", exc)
        connected = False
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "Connected" if connected else "Disconnected",
    }


# Quotes


@router.get("/quotes", response_model=ApiResponse)
def get_quotes(
    paging: tuple[int, int] = Depends(_page_params),
    author: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: DbClient = Depends(get_db_client),
):
    page, limit = paging
    filters = QuoteFilters(author=author, category=category, search=search)
    with _store_errors("Failed to fetch quotes"):
        result = listing.list_quotes(db, page, limit, filters)
    return _page_response(result)


@router.get("/quotes/random", response_model=ApiResponse)
def get_random_quote(db: DbClient = Depends(get_db_client)):
    with _store_errors("Failed to fetch random quote"):
        quote = selection.random_quote(db)
    return _pick_response(quote, "No quotes available")


@router.get("/quotes/daily", response_model=ApiResponse)
def get_daily_quote(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    day = selection.today_in(settings.daily_pick_timezone)
    with _store_errors("Failed to fetch daily quote"):
        quote = selection.daily_quote(db, day)
    return _pick_response(quote, "No quotes available")


@router.get("/quotes/categories", response_model=ApiResponse)
def get_quote_categories(db: DbClient = Depends(get_db_client)):
    with _store_errors("Failed to fetch categories"):
        categories = db.list_quote_categories()
    return ApiResponse(success=True, data=categories)


@router.get("/quotes/{quote_id}", response_model=ApiResponse)
def get_quote(quote_id: int, db: DbClient = Depends(get_db_client)):
    with _store_errors("Failed to fetch quote"):
        quote = db.get_quote(quote_id)
    if quote is None:
        raise HTTPException(status_code=404, detail="Quote not found")
    return ApiResponse(success=True, data=quote.as_dict())


@router.post("/quotes", response_model=ApiResponse, status_code=201)
def submit_quote(
    payload: QuoteCreate,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to submit quote"):
        quote = db.create_quote(
            content=payload.content.strip(),
            author=payload.author.strip(),
            category=payload.category,
            tags=[tag.strip() for tag in payload.tags if tag.strip()],
            submitted_by=user_id,
            status=STATUS_APPROVED,
        )
    return ApiResponse(success=True, data=quote.as_dict(), message="Quote submitted")


@router.post("/quotes/{quote_id}/like", response_model=ApiResponse)
def toggle_quote_like(
    quote_id: int,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to update like"):
        state = favorites.toggle_like(db, user_id, quote_id)
    return ApiResponse(success=True, data=state.as_dict())


# Proverbs


@router.get("/proverbs", response_model=ApiResponse)
def get_proverbs(
    paging: tuple[int, int] = Depends(_page_params),
    origin: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: DbClient = Depends(get_db_client),
):
    page, limit = paging
    filters = ProverbFilters(origin=origin, category=category, search=search)
    with _store_errors("Failed to fetch proverbs"):
        result = listing.list_proverbs(db, page, limit, filters)
    return _page_response(result)


@router.get("/proverbs/random", response_model=ApiResponse)
def get_random_proverb(db: DbClient = Depends(get_db_client)):
    with _store_errors("Failed to fetch random proverb"):
        proverb = selection.random_proverb(db)
    return _pick_response(proverb, "No proverbs available")


@router.get("/proverbs/daily", response_model=ApiResponse)
def get_daily_proverb(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    day = selection.today_in(settings.daily_pick_timezone)
    with _store_errors("Failed to fetch daily proverb"):
        proverb = selection.daily_proverb(db, day)
    return _pick_response(proverb, "No proverbs available")


@router.get("/proverbs/{proverb_id}", response_model=ApiResponse)
def get_proverb(proverb_id: int, db: DbClient = Depends(get_db_client)):
    with _store_errors("Failed to fetch proverb"):
        proverb = db.get_proverb(proverb_id)
    if proverb is None or proverb.status != STATUS_APPROVED:
        raise HTTPException(status_code=404, detail="Proverb not found")
    return ApiResponse(success=True, data=proverb.as_dict())


@router.post("/proverbs", response_model=ApiResponse, status_code=201)
def submit_proverb(
    payload: ProverbCreate,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to submit proverb"):
        proverb = db.create_proverb(
            content=payload.content.strip(),
            origin=payload.origin,
            category=payload.category,
            meaning=payload.meaning,
            status=STATUS_PENDING,
        )
    logger.info("User %s submitted proverb %s for review", user_id, proverb.id)
    return ApiResponse(
        success=True, data=proverb.as_dict(), message="Proverb submitted for review"
    )


# Favorites


@router.get("/favorites", response_model=ApiResponse)
def get_favorites(
    paging: tuple[int, int] = Depends(_page_params),
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    page, limit = paging
    with _store_errors("Failed to fetch favorites"):
        result = listing.list_user_favorites(db, user_id, page, limit)
    return _page_response(result)


@router.post("/favorites", response_model=ApiResponse, status_code=201)
def add_favorite(
    payload: FavoriteCreate,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    if payload.quote_id is None:
        raise HTTPException(status_code=400, detail="Missing quote_id")
    with _store_errors("Failed to add favorite"):
        favorite = favorites.add_favorite(db, user_id, payload.quote_id)
    return ApiResponse(success=True, data=favorite.as_dict(), message="Added to favorites")


@router.delete("/favorites/{quote_id}", response_model=ApiResponse)
def remove_favorite(
    quote_id: int,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to remove favorite"):
        favorites.remove_favorite(db, user_id, quote_id)
    return ApiResponse(success=True, message="Removed from favorites")


@router.get("/favorites/check/{quote_id}", response_model=FavoriteCheckResponse)
def check_favorite(
    quote_id: int,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to check favorite status"):
        favorited = favorites.is_favorited(db, user_id, quote_id)
    return FavoriteCheckResponse(success=True, is_favorited=favorited)


# Users


@router.get("/users/profile", response_model=ApiResponse)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to fetch profile"):
        profile, created = profiles.get_or_create_profile(db, user_id)
    return ApiResponse(
        success=True,
        data=profile.as_dict(),
        message="Profile created" if created else None,
    )


@router.put("/users/profile", response_model=ApiResponse)
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to update profile"):
        profile = profiles.update_profile(
            db,
            user_id,
            username=payload.username,
            avatar_url=payload.avatar_url,
            bio=payload.bio,
        )
    return ApiResponse(success=True, data=profile.as_dict(), message="Profile updated")


@router.get("/users/stats", response_model=ApiResponse)
def get_user_stats(
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    with _store_errors("Failed to fetch user stats"):
        stats = aggregation.user_stats(db, user_id)
    return ApiResponse(success=True, data=stats.as_dict())


@router.get("/users/my-quotes", response_model=ApiResponse)
def get_my_quotes(
    paging: tuple[int, int] = Depends(_page_params),
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
):
    page, limit = paging
    with _store_errors("Failed to fetch user quotes"):
        result = listing.list_user_quotes(db, user_id, page, limit)
    return _page_response(result)


# Dashboard


@router.get("/dashboard", response_model=ApiResponse)
def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    stats = aggregation.dashboard_stats(
        db, user_id, max_workers=settings.dashboard_workers
    )
    recent = settings.recent_items_limit
    with _store_errors("Failed to fetch dashboard stats"):
        recent_quotes = db.list_quotes(offset=0, limit=recent)
        recent_proverbs = db.list_proverbs(ProverbFilters(), offset=0, limit=recent)
    data = stats.as_dict()
    data["recent_quotes"] = [quote.as_dict() for quote in recent_quotes]
    data["recent_proverbs"] = [proverb.as_dict() for proverb in recent_proverbs]
    return ApiResponse(success=True, data=data)


@router.get(
    "/dashboard/trending",
    response_model=ApiResponse,
    dependencies=[Depends(get_current_user_id)],
)
def get_trending(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    with _store_errors("Failed to fetch trending quotes"):
        ranked = aggregation.trending_quotes(
            db, window=settings.trending_window, limit=settings.trending_limit
        )
    return ApiResponse(success=True, data=[item.as_dict() for item in ranked])


@router.get("/dashboard/daily", response_model=ApiResponse)
def get_dashboard_daily(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    return get_daily_quote(db=db, settings=settings)


@router.get("/dashboard/health", response_model=ApiResponse)
def get_system_health(db: DbClient = Depends(get_db_client)):
    data = aggregation.table_health(db)
    data["timestamp"] = datetime.now(timezone.utc).isoformat()
    return ApiResponse(success=True, data=data)
