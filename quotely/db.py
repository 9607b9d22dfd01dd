"""
Database abstraction for Postgres and an in-memory test implementation.

Both clients expose the same relational operations (filter, sort, paginate,
count, insert, update, delete, existence check) over the quotes, proverbs,
user_profiles, user_favorites and quote_likes collections.
"""

from __future__ import annotations

import itertools
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Protocol

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    delete,
    func,
    or_,
    select,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from quotely.errors import AlreadyFavorited, StoreError

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"


class DbClient(Protocol):
    """Interface for database access."""

    # Quotes
    def count_quotes(self, filters: Optional["QuoteFilters"] = None) -> int:
        ...

    def list_quotes(
        self, filters: Optional["QuoteFilters"] = None, *, offset: int = 0, limit: int = 20
    ) -> list["QuoteRecord"]:
        ...

    def quote_at(self, offset: int) -> Optional["QuoteRecord"]:
        ...

    def get_quote(self, quote_id: int) -> Optional["QuoteRecord"]:
        ...

    def create_quote(
        self,
        *,
        content: str,
        author: str,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        submitted_by: Optional[str] = None,
        status: str = STATUS_APPROVED,
        created_at: Optional[float] = None,
    ) -> "QuoteRecord":
        ...

    def list_quote_categories(self) -> list[str]:
        ...

    def quote_ids_by_submitter(self, user_id: str) -> list[int]:
        ...

    # Proverbs
    def count_proverbs(self, filters: Optional["ProverbFilters"] = None) -> int:
        ...

    def list_proverbs(
        self, filters: Optional["ProverbFilters"] = None, *, offset: int = 0, limit: int = 20
    ) -> list["ProverbRecord"]:
        ...

    def proverb_at(self, offset: int) -> Optional["ProverbRecord"]:
        ...

    def get_proverb(self, proverb_id: int) -> Optional["ProverbRecord"]:
        ...

    def create_proverb(
        self,
        *,
        content: str,
        origin: Optional[str] = None,
        category: Optional[str] = None,
        meaning: Optional[str] = None,
        status: str = STATUS_PENDING,
        created_at: Optional[float] = None,
    ) -> "ProverbRecord":
        ...

    # Favorites
    def get_favorite(self, user_id: str, quote_id: int) -> Optional["FavoriteRecord"]:
        ...

    def create_favorite(self, user_id: str, quote_id: int) -> "FavoriteRecord":
        ...

    def delete_favorite(self, user_id: str, quote_id: int) -> bool:
        ...

    def count_favorites(self, user_id: Optional[str] = None) -> int:
        ...

    def list_favorites(
        self, user_id: str, *, offset: int = 0, limit: int = 20
    ) -> list["FavoriteRecord"]:
        ...

    # Likes
    def has_like(self, user_id: str, quote_id: int) -> bool:
        ...

    def create_like(self, user_id: str, quote_id: int) -> None:
        ...

    def delete_like(self, user_id: str, quote_id: int) -> bool:
        ...

    def like_quote_ids(self, quote_ids: list[int]) -> list[int]:
        ...

    def count_likes(self, quote_ids: list[int]) -> int:
        ...

    # Profiles
    def get_profile(self, user_id: str) -> Optional["UserProfileRecord"]:
        ...

    def create_profile(
        self,
        user_id: str,
        username: str,
        *,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> "UserProfileRecord":
        ...

    def update_profile(self, user_id: str, updates: dict) -> Optional["UserProfileRecord"]:
        ...

    def count_profiles(self) -> int:
        ...


@dataclass
class QuoteRecord:
    id: int
    content: str
    author: str
    category: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    submitted_by: Optional[str] = None
    status: str = STATUS_APPROVED
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "author": self.author,
            "category": self.category,
            "tags": list(self.tags),
            "submitted_by": self.submitted_by,
            "status": self.status,
            "created_at": self.created_at,
        }


@dataclass
class ProverbRecord:
    id: int
    content: str
    origin: Optional[str] = None
    category: Optional[str] = None
    meaning: Optional[str] = None
    status: str = STATUS_PENDING
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "origin": self.origin,
            "category": self.category,
            "meaning": self.meaning,
            "status": self.status,
            "created_at": self.created_at,
        }


@dataclass
class FavoriteRecord:
    id: int
    user_id: str
    quote_id: int
    created_at: float = field(default_factory=lambda: time.time())
    quote: Optional[QuoteRecord] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "quote_id": self.quote_id,
            "created_at": self.created_at,
            "quote": self.quote.as_dict() if self.quote else None,
        }


@dataclass
class UserProfileRecord:
    id: str
    username: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class QuoteFilters:
    """Conjunctive quote filters. Empty values are ignored."""

    author: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None
    submitted_by: Optional[str] = None

    def matches(self, quote: QuoteRecord) -> bool:
        if self.author and self.author.lower() not in (quote.author or "").lower():
            return False
        if self.category and quote.category != self.category:
            return False
        if self.search:
            needle = self.search.lower()
            if needle not in quote.content.lower() and self.search not in quote.tags:
                return False
        if self.submitted_by and quote.submitted_by != self.submitted_by:
            return False
        return True


@dataclass
class ProverbFilters:
    """Conjunctive proverb filters. Only approved proverbs unless asked otherwise."""

    origin: Optional[str] = None
    category: Optional[str] = None
    search: Optional[str] = None
    include_unapproved: bool = False

    def matches(self, proverb: ProverbRecord) -> bool:
        if not self.include_unapproved and proverb.status != STATUS_APPROVED:
            return False
        if self.origin and self.origin.lower() not in (proverb.origin or "").lower():
            return False
        if self.category and proverb.category != self.category:
            return False
        if self.search:
            needle = self.search.lower()
            if needle not in proverb.content.lower() and needle not in (
                proverb.meaning or ""
            ).lower():
                return False
        return True


def _newest_first(items):
    return sorted(items, key=lambda item: (item.created_at, item.id), reverse=True)


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.quotes: Dict[int, QuoteRecord] = {}
        self.proverbs: Dict[int, ProverbRecord] = {}
        self.favorites: Dict[tuple[str, int], FavoriteRecord] = {}
        self.likes: Dict[tuple[str, int], float] = {}
        self.profiles: Dict[str, UserProfileRecord] = {}
        self._ids = itertools.count(1)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.quotes.clear()
        self.proverbs.clear()
        self.favorites.clear()
        self.likes.clear()
        self.profiles.clear()
        self._ids = itertools.count(1)

    def count_quotes(self, filters: Optional[QuoteFilters] = None) -> int:
        filters = filters or QuoteFilters()
        return sum(1 for quote in self.quotes.values() if filters.matches(quote))

    def list_quotes(
        self, filters: Optional[QuoteFilters] = None, *, offset: int = 0, limit: int = 20
    ) -> list[QuoteRecord]:
        filters = filters or QuoteFilters()
        matched = [quote for quote in self.quotes.values() if filters.matches(quote)]
        return _newest_first(matched)[offset : offset + limit]

    def quote_at(self, offset: int) -> Optional[QuoteRecord]:
        ordered = sorted(self.quotes)
        if 0 <= offset < len(ordered):
            return self.quotes[ordered[offset]]
        return None

    def get_quote(self, quote_id: int) -> Optional[QuoteRecord]:
        return self.quotes.get(quote_id)

    def create_quote(
        self,
        *,
        content: str,
        author: str,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        submitted_by: Optional[str] = None,
        status: str = STATUS_APPROVED,
        created_at: Optional[float] = None,
    ) -> QuoteRecord:
        record = QuoteRecord(
            id=next(self._ids),
            content=content,
            author=author,
            category=category,
            tags=list(tags or []),
            submitted_by=submitted_by,
            status=status,
            created_at=created_at if created_at is not None else time.time(),
        )
        self.quotes[record.id] = record
        return record

    def list_quote_categories(self) -> list[str]:
        return sorted({q.category for q in self.quotes.values() if q.category})

    def quote_ids_by_submitter(self, user_id: str) -> list[int]:
        return [q.id for q in self.quotes.values() if q.submitted_by == user_id]

    def count_proverbs(self, filters: Optional[ProverbFilters] = None) -> int:
        filters = filters or ProverbFilters()
        return sum(1 for proverb in self.proverbs.values() if filters.matches(proverb))

    def list_proverbs(
        self, filters: Optional[ProverbFilters] = None, *, offset: int = 0, limit: int = 20
    ) -> list[ProverbRecord]:
        filters = filters or ProverbFilters()
        matched = [p for p in self.proverbs.values() if filters.matches(p)]
        return _newest_first(matched)[offset : offset + limit]

    def proverb_at(self, offset: int) -> Optional[ProverbRecord]:
        approved = [
            self.proverbs[pid]
            for pid in sorted(self.proverbs)
            if self.proverbs[pid].status == STATUS_APPROVED
        ]
        if 0 <= offset < len(approved):
            return approved[offset]
        return None

    def get_proverb(self, proverb_id: int) -> Optional[ProverbRecord]:
        return self.proverbs.get(proverb_id)

    def create_proverb(
        self,
        *,
        content: str,
        origin: Optional[str] = None,
        category: Optional[str] = None,
        meaning: Optional[str] = None,
        status: str = STATUS_PENDING,
        created_at: Optional[float] = None,
    ) -> ProverbRecord:
        record = ProverbRecord(
            id=next(self._ids),
            content=content,
            origin=origin,
            category=category,
            meaning=meaning,
            status=status,
            created_at=created_at if created_at is not None else time.time(),
        )
        self.proverbs[record.id] = record
        return record

    def get_favorite(self, user_id: str, quote_id: int) -> Optional[FavoriteRecord]:
        return self.favorites.get((user_id, quote_id))

    def create_favorite(self, user_id: str, quote_id: int) -> FavoriteRecord:
        if (user_id, quote_id) in self.favorites:
            raise AlreadyFavorited(user_id, quote_id)
        record = FavoriteRecord(id=next(self._ids), user_id=user_id, quote_id=quote_id)
        self.favorites[(user_id, quote_id)] = record
        return record

    def delete_favorite(self, user_id: str, quote_id: int) -> bool:
        return self.favorites.pop((user_id, quote_id), None) is not None

    def count_favorites(self, user_id: Optional[str] = None) -> int:
        if user_id is None:
            return len(self.favorites)
        return sum(1 for fav in self.favorites.values() if fav.user_id == user_id)

    def list_favorites(
        self, user_id: str, *, offset: int = 0, limit: int = 20
    ) -> list[FavoriteRecord]:
        mine = [fav for fav in self.favorites.values() if fav.user_id == user_id]
        page = _newest_first(mine)[offset : offset + limit]
        return [
            FavoriteRecord(
                id=fav.id,
                user_id=fav.user_id,
                quote_id=fav.quote_id,
                created_at=fav.created_at,
                quote=self.quotes.get(fav.quote_id),
            )
            for fav in page
        ]

    def has_like(self, user_id: str, quote_id: int) -> bool:
        return (user_id, quote_id) in self.likes

    def create_like(self, user_id: str, quote_id: int) -> None:
        self.likes.setdefault((user_id, quote_id), time.time())

    def delete_like(self, user_id: str, quote_id: int) -> bool:
        return self.likes.pop((user_id, quote_id), None) is not None

    def like_quote_ids(self, quote_ids: list[int]) -> list[int]:
        wanted = set(quote_ids)
        return [quote_id for (_, quote_id) in self.likes if quote_id in wanted]

    def count_likes(self, quote_ids: list[int]) -> int:
        return len(self.like_quote_ids(quote_ids))

    def get_profile(self, user_id: str) -> Optional[UserProfileRecord]:
        return self.profiles.get(user_id)

    def create_profile(
        self,
        user_id: str,
        username: str,
        *,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> UserProfileRecord:
        record = UserProfileRecord(
            id=user_id, username=username, bio=bio, avatar_url=avatar_url
        )
        self.profiles[user_id] = record
        return record

    def update_profile(self, user_id: str, updates: dict) -> Optional[UserProfileRecord]:
        profile = self.profiles.get(user_id)
        if not profile:
            return None
        for key, value in updates.items():
            setattr(profile, key, value)
        profile.updated_at = time.time()
        return profile

    def count_profiles(self) -> int:
        return len(self.profiles)


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.Session() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def _to_quote_record(self, row: "QuoteRow") -> QuoteRecord:
        return QuoteRecord(
            id=row.id,
            content=row.content,
            author=row.author,
            category=row.category,
            tags=[tag.tag for tag in row.tags],
            submitted_by=row.submitted_by,
            status=row.status,
            created_at=row.created_at,
        )

    def _to_proverb_record(self, row: "ProverbRow") -> ProverbRecord:
        return ProverbRecord(
            id=row.id,
            content=row.content,
            origin=row.origin,
            category=row.category,
            meaning=row.meaning,
            status=row.status,
            created_at=row.created_at,
        )

    def _to_profile_record(self, row: "UserProfileRow") -> UserProfileRecord:
        return UserProfileRecord(
            id=row.id,
            username=row.username,
            bio=row.bio,
            avatar_url=row.avatar_url,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _quote_conditions(self, filters: Optional[QuoteFilters]) -> list:
        filters = filters or QuoteFilters()
        conditions = []
        if filters.author:
            conditions.append(QuoteRow.author.icontains(filters.author, autoescape=True))
        if filters.category:
            conditions.append(QuoteRow.category == filters.category)
        if filters.search:
            conditions.append(
                or_(
                    QuoteRow.content.icontains(filters.search, autoescape=True),
                    QuoteRow.tags.any(QuoteTagRow.tag == filters.search),
                )
            )
        if filters.submitted_by:
            conditions.append(QuoteRow.submitted_by == filters.submitted_by)
        return conditions

    def _proverb_conditions(self, filters: Optional[ProverbFilters]) -> list:
        filters = filters or ProverbFilters()
        conditions = []
        if not filters.include_unapproved:
            conditions.append(ProverbRow.status == STATUS_APPROVED)
        if filters.origin:
            conditions.append(ProverbRow.origin.icontains(filters.origin, autoescape=True))
        if filters.category:
            conditions.append(ProverbRow.category == filters.category)
        if filters.search:
            conditions.append(
                or_(
                    ProverbRow.content.icontains(filters.search, autoescape=True),
                    ProverbRow.meaning.icontains(filters.search, autoescape=True),
                )
            )
        return conditions

    def count_quotes(self, filters: Optional[QuoteFilters] = None) -> int:
        stmt = select(func.count()).select_from(QuoteRow).where(
            *self._quote_conditions(filters)
        )
        with self._session() as session:
            return session.scalar(stmt) or 0

    def list_quotes(
        self, filters: Optional[QuoteFilters] = None, *, offset: int = 0, limit: int = 20
    ) -> list[QuoteRecord]:
        stmt = (
            select(QuoteRow)
            .where(*self._quote_conditions(filters))
            .order_by(QuoteRow.created_at.desc(), QuoteRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._session() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_quote_record(row) for row in rows]

    def quote_at(self, offset: int) -> Optional[QuoteRecord]:
        stmt = select(QuoteRow).order_by(QuoteRow.id.asc()).offset(offset).limit(1)
        with self._session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_quote_record(row) if row else None

    def get_quote(self, quote_id: int) -> Optional[QuoteRecord]:
        with self._session() as session:
            row = session.get(QuoteRow, quote_id)
            return self._to_quote_record(row) if row else None

    def create_quote(
        self,
        *,
        content: str,
        author: str,
        category: Optional[str] = None,
        tags: Optional[list[str]] = None,
        submitted_by: Optional[str] = None,
        status: str = STATUS_APPROVED,
        created_at: Optional[float] = None,
    ) -> QuoteRecord:
        with self._session() as session:
            row = QuoteRow(
                content=content,
                author=author,
                category=category,
                submitted_by=submitted_by,
                status=status,
                created_at=created_at if created_at is not None else time.time(),
                tags=[QuoteTagRow(tag=tag) for tag in dict.fromkeys(tags or [])],
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_quote_record(row)

    def list_quote_categories(self) -> list[str]:
        stmt = (
            select(QuoteRow.category)
            .where(QuoteRow.category.is_not(None))
            .distinct()
            .order_by(QuoteRow.category)
        )
        with self._session() as session:
            return list(session.execute(stmt).scalars().all())

    def quote_ids_by_submitter(self, user_id: str) -> list[int]:
        stmt = select(QuoteRow.id).where(QuoteRow.submitted_by == user_id)
        with self._session() as session:
            return list(session.execute(stmt).scalars().all())

    def count_proverbs(self, filters: Optional[ProverbFilters] = None) -> int:
        stmt = select(func.count()).select_from(ProverbRow).where(
            *self._proverb_conditions(filters)
        )
        with self._session() as session:
            return session.scalar(stmt) or 0

    def list_proverbs(
        self, filters: Optional[ProverbFilters] = None, *, offset: int = 0, limit: int = 20
    ) -> list[ProverbRecord]:
        stmt = (
            select(ProverbRow)
            .where(*self._proverb_conditions(filters))
            .order_by(ProverbRow.created_at.desc(), ProverbRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._session() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_proverb_record(row) for row in rows]

    def proverb_at(self, offset: int) -> Optional[ProverbRecord]:
        stmt = (
            select(ProverbRow)
            .where(ProverbRow.status == STATUS_APPROVED)
            .order_by(ProverbRow.id.asc())
            .offset(offset)
            .limit(1)
        )
        with self._session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_proverb_record(row) if row else None

    def get_proverb(self, proverb_id: int) -> Optional[ProverbRecord]:
        with self._session() as session:
            row = session.get(ProverbRow, proverb_id)
            return self._to_proverb_record(row) if row else None

    def create_proverb(
        self,
        *,
        content: str,
        origin: Optional[str] = None,
        category: Optional[str] = None,
        meaning: Optional[str] = None,
        status: str = STATUS_PENDING,
        created_at: Optional[float] = None,
    ) -> ProverbRecord:
        with self._session() as session:
            row = ProverbRow(
                content=content,
                origin=origin,
                category=category,
                meaning=meaning,
                status=status,
                created_at=created_at if created_at is not None else time.time(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_proverb_record(row)

    def get_favorite(self, user_id: str, quote_id: int) -> Optional[FavoriteRecord]:
        stmt = select(FavoriteRow).where(
            FavoriteRow.user_id == user_id, FavoriteRow.quote_id == quote_id
        )
        with self._session() as session:
            row = session.execute(stmt).scalar_one_or_none()
            if not row:
                return None
            return FavoriteRecord(
                id=row.id,
                user_id=row.user_id,
                quote_id=row.quote_id,
                created_at=row.created_at,
            )

    def create_favorite(self, user_id: str, quote_id: int) -> FavoriteRecord:
        if self.get_favorite(user_id, quote_id):
            raise AlreadyFavorited(user_id, quote_id)
        with self._session() as session:
            row = FavoriteRow(user_id=user_id, quote_id=quote_id, created_at=time.time())
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race with a concurrent insert of the same pair.
                session.rollback()
                raise AlreadyFavorited(user_id, quote_id)
            session.refresh(row)
            return FavoriteRecord(
                id=row.id,
                user_id=row.user_id,
                quote_id=row.quote_id,
                created_at=row.created_at,
            )

    def delete_favorite(self, user_id: str, quote_id: int) -> bool:
        stmt = delete(FavoriteRow).where(
            FavoriteRow.user_id == user_id, FavoriteRow.quote_id == quote_id
        )
        with self._session() as session:
            result = session.execute(stmt)
            session.commit()
            return bool(result.rowcount)

    def count_favorites(self, user_id: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(FavoriteRow)
        if user_id is not None:
            stmt = stmt.where(FavoriteRow.user_id == user_id)
        with self._session() as session:
            return session.scalar(stmt) or 0

    def list_favorites(
        self, user_id: str, *, offset: int = 0, limit: int = 20
    ) -> list[FavoriteRecord]:
        stmt = (
            select(FavoriteRow, QuoteRow)
            .outerjoin(QuoteRow, QuoteRow.id == FavoriteRow.quote_id)
            .where(FavoriteRow.user_id == user_id)
            .order_by(FavoriteRow.created_at.desc(), FavoriteRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._session() as session:
            results: list[FavoriteRecord] = []
            for fav, quote in session.execute(stmt).all():
                results.append(
                    FavoriteRecord(
                        id=fav.id,
                        user_id=fav.user_id,
                        quote_id=fav.quote_id,
                        created_at=fav.created_at,
                        quote=self._to_quote_record(quote) if quote else None,
                    )
                )
            return results

    def has_like(self, user_id: str, quote_id: int) -> bool:
        with self._session() as session:
            return session.get(LikeRow, (quote_id, user_id)) is not None

    def create_like(self, user_id: str, quote_id: int) -> None:
        with self._session() as session:
            if session.get(LikeRow, (quote_id, user_id)) is not None:
                return
            session.add(LikeRow(quote_id=quote_id, user_id=user_id, created_at=time.time()))
            session.commit()

    def delete_like(self, user_id: str, quote_id: int) -> bool:
        stmt = delete(LikeRow).where(
            LikeRow.user_id == user_id, LikeRow.quote_id == quote_id
        )
        with self._session() as session:
            result = session.execute(stmt)
            session.commit()
            return bool(result.rowcount)

    def like_quote_ids(self, quote_ids: list[int]) -> list[int]:
        if not quote_ids:
            return []
        stmt = select(LikeRow.quote_id).where(LikeRow.quote_id.in_(quote_ids))
        with self._session() as session:
            return list(session.execute(stmt).scalars().all())

    def count_likes(self, quote_ids: list[int]) -> int:
        if not quote_ids:
            return 0
        stmt = (
            select(func.count())
            .select_from(LikeRow)
            .where(LikeRow.quote_id.in_(quote_ids))
        )
        with self._session() as session:
            return session.scalar(stmt) or 0

    def get_profile(self, user_id: str) -> Optional[UserProfileRecord]:
        with self._session() as session:
            row = session.get(UserProfileRow, user_id)
            return self._to_profile_record(row) if row else None

    def create_profile(
        self,
        user_id: str,
        username: str,
        *,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> UserProfileRecord:
        now = time.time()
        with self._session() as session:
            row = UserProfileRow(
                id=user_id,
                username=username,
                bio=bio,
                avatar_url=avatar_url,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_profile_record(row)

    def update_profile(self, user_id: str, updates: dict) -> Optional[UserProfileRecord]:
        with self._session() as session:
            row = session.get(UserProfileRow, user_id)
            if not row:
                return None
            for key, value in updates.items():
                setattr(row, key, value)
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_profile_record(row)

    def count_profiles(self) -> int:
        stmt = select(func.count()).select_from(UserProfileRow)
        with self._session() as session:
            return session.scalar(stmt) or 0


Base = declarative_base()


class QuoteRow(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True, index=True)
    submitted_by = Column(String, nullable=True, index=True)
    status = Column(String, nullable=False, default=STATUS_APPROVED)
    created_at = Column(Float, nullable=False, index=True)

    tags = relationship(
        "QuoteTagRow",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="QuoteTagRow.tag",
    )


class QuoteTagRow(Base):
    __tablename__ = "quote_tags"

    quote_id = Column(Integer, ForeignKey("quotes.id"), primary_key=True)
    tag = Column(String, primary_key=True)


class ProverbRow(Base):
    __tablename__ = "proverbs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    origin = Column(String, nullable=True, index=True)
    category = Column(String, nullable=True, index=True)
    meaning = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=STATUS_PENDING, index=True)
    created_at = Column(Float, nullable=False, index=True)


class UserProfileRow(Base):
    __tablename__ = "user_profiles"

    id = Column(String, primary_key=True)
    username = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class FavoriteRow(Base):
    __tablename__ = "user_favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "quote_id", name="uq_user_favorites_user_quote"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=False, index=True)
    created_at = Column(Float, nullable=False)


class LikeRow(Base):
    __tablename__ = "quote_likes"

    quote_id = Column(Integer, ForeignKey("quotes.id"), primary_key=True)
    user_id = Column(String, primary_key=True)
    created_at = Column(Float, nullable=False)
