"""Async database access: engine construction, sessions and the declarative base."""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from rentalops.config import settings

POOL_DEFAULTS: dict[str, Any] = {
    "pool_pre_ping": True,
    "pool_size": 10,
    "max_overflow": 20,
}


def make_engine(url: str | None = None, **options: Any) -> AsyncEngine:
    """Build an asyncpg engine for ``url`` (the configured database by default).

    Keyword options override the application defaults. One-shot tools such as
    the migration CLI pass ``poolclass=NullPool``, which takes no pool sizing.
    """
    kwargs: dict[str, Any] = {"echo": settings.debug, **POOL_DEFAULTS, **options}
    if "poolclass" in options:
        kwargs.pop("pool_size", None)
        kwargs.pop("max_overflow", None)
    return create_async_engine(url or settings.async_database_url, **kwargs)


engine = make_engine()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """Mixin that adds created_at and updated_at columns."""

    # Server-generated timestamps are read back with RETURNING on insert and update.
    __mapper_args__ = {"eager_defaults": True}

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )


class UUIDPrimaryKeyMixin:
    """Mixin that adds a UUID primary key column."""

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> AsyncIterator[AsyncSession]:
    """Session that commits when the block exits cleanly and rolls back otherwise."""
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one transactional session per request.

    Usage::

        @router.get("/guests")
        async def list_guests(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with session_scope() as session:
        yield session
