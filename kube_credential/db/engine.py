"""Async SQLAlchemy engine and session factory.

When DATABASE_URL is configured, provides:
- async engine (PostgreSQL via asyncpg, or SQLite via aiosqlite)
- async session factory for request-scoped sessions
- lifespan hook that creates tables on startup and disposes on shutdown

When DATABASE_URL is None, all exports are None and the services fall
back to in-memory repositories.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from kube_credential.core.config import SETTINGS
from kube_credential.core.errors import StoreError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all table models."""


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    kwargs: dict[str, Any] = {"echo": echo}
    # SQLite pools are managed by the dialect; sizing only applies to servers
    if make_url(database_url).get_backend_name() != "sqlite":
        kwargs.update(pool_size=5, max_overflow=10)
    return create_async_engine(database_url, **kwargs)


# --- Engine and session factory (None when no DATABASE_URL) ---

if SETTINGS.database_url:
    engine: AsyncEngine | None = build_engine(
        SETTINGS.database_url,
        echo=SETTINGS.is_dev,  # log SQL in dev only
    )
    async_session_factory: async_sessionmaker[AsyncSession] | None = (
        async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    )
else:
    engine = None
    async_session_factory = None


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Request-scoped unit of work: commits on success, rolls back on exception."""
    if async_session_factory is None:
        raise RuntimeError(
            "DATABASE_URL is not configured; cannot create database session"
        )
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise StoreError(f"Failed to commit: {e}") from e


async def create_tables(target: AsyncEngine) -> None:
    # Import table module so Base.metadata sees all table definitions.
    import kube_credential.db.tables  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def lifespan_db():
    """Startup/shutdown hook for the database engine."""
    if engine is None:
        logger.info("No DATABASE_URL configured, using in-memory repositories")
        yield
        return

    await create_tables(engine)
    logger.info("Database engine ready: %s", engine.url.render_as_string(hide_password=True))
    yield
    await engine.dispose()
    logger.info("Database engine disposed")
