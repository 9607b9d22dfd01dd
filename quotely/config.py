"""
Configuration and settings for the Quotely backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="QUOTELY_USE_IN_MEMORY_BACKENDS"
    )
    seed_sample_data: bool = Field(
        default=False, validation_alias="QUOTELY_SEED_SAMPLE_DATA"
    )

    cors_origin: str = Field(default="*")
    log_level: str = Field(default="INFO")

    # Listing
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Dashboard
    trending_window: int = Field(default=50, ge=1)
    trending_limit: int = Field(default=10, ge=1)
    recent_items_limit: int = Field(default=10, ge=1)
    dashboard_workers: int = Field(default=6, ge=1)

    # Calendar used for the daily pick
    daily_pick_timezone: str = Field(default="UTC")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
