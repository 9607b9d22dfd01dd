"""
Pydantic schemas for the Quotely API.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ApiResponse(BaseModel):
    """Envelope shared by every endpoint."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    pagination: Optional[Pagination] = None


class FavoriteCheckResponse(BaseModel):
    success: bool
    is_favorited: bool


class QuoteCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    author: str = Field(..., min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: list[str] = Field(default_factory=list, max_length=20)


class ProverbCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    origin: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)
    meaning: Optional[str] = Field(default=None, max_length=2000)


class FavoriteCreate(BaseModel):
    quote_id: Optional[int] = None


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(default=None, max_length=64)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    bio: Optional[str] = Field(default=None, max_length=1000)
