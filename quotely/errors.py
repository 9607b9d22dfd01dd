"""
Error taxonomy shared by the data-access, aggregation and route layers.
"""

from __future__ import annotations


class QuotelyError(Exception):
    """Base class for application errors."""


class NotFound(QuotelyError):
    """A lookup by primary key matched nothing."""


class InvalidRequest(QuotelyError):
    """Caller supplied values the operation cannot accept."""


class AlreadyFavorited(QuotelyError):
    """The (user, quote) pair is already a favorite."""

    def __init__(self, user_id: str, quote_id: int):
        super().__init__(f"Quote {quote_id} is already a favorite of {user_id}")
        self.user_id = user_id
        self.quote_id = quote_id


class StoreError(QuotelyError):
    """Unexpected failure reported by the backing store."""


class DashboardUnavailable(QuotelyError):
    """One or more dashboard counts failed."""

    def __init__(self, failed: list[str]):
        super().__init__("Dashboard counts failed: " + ", ".join(failed))
        self.failed = failed
