"""
Engine and session lifecycle for the league store.

Provides the process-wide async SQLAlchemy engine and session factory.
Repositories receive an AsyncSession and never own its lifecycle:
acquisition, pooling and disposal happen here.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from league_data.core.config import settings

logger = logging.getLogger(__name__)

_async_engine: AsyncEngine | None = None
_async_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def _engine_kwargs() -> dict[str, Any]:
    """Engine arguments for the configured store."""
    if settings.is_sqlite:
        # A single shared connection keeps in-memory databases alive across sessions
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
            "echo": settings.db_echo,
        }

    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,  # Verify connections before use
        "echo": settings.db_echo,
        "connect_args": {"server_settings": {"timezone": "UTC"}, "timeout": 30},
    }


def _configure_sqlite_connection(dbapi_connection: Any, _connection_record: Any) -> None:
    """Make LIKE case-sensitive on SQLite, matching PostgreSQL."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


def create_fresh_async_engine() -> AsyncEngine:
    """Build an engine for the configured store, bypassing the process-wide cache.

    Each test builds its own so the in-memory database lives and dies with it.
    """
    url = settings.async_url
    if not url:
        raise RuntimeError("DATABASE_URL is required")

    engine = create_async_engine(url, **_engine_kwargs())
    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
    return engine


def get_async_engine() -> AsyncEngine:
    """
    Process-wide engine, created on first use.

    PostgreSQL is reached through asyncpg, SQLite through aiosqlite.
    """
    global _async_engine

    if _async_engine is not None:
        return _async_engine

    _async_engine = create_fresh_async_engine()
    logger.info(
        "Created async database engine",
        extra={"dialect": _async_engine.dialect.name},
    )
    return _async_engine


def get_async_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """
    Process-wide session factory bound to get_async_engine().

    Sessions keep loaded attributes after commit so that records returned
    by a repository call remain readable once its unit of work is committed.
    """
    global _async_sessionmaker
    if _async_sessionmaker is not None:
        return _async_sessionmaker

    _async_sessionmaker = async_sessionmaker(
        bind=get_async_engine(),
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    return _async_sessionmaker


async def reset_async_engine() -> None:
    """Dispose the process-wide engine; the next call to get_async_engine() builds a new one."""
    global _async_engine, _async_sessionmaker

    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_sessionmaker = None


@asynccontextmanager
async def get_async_db_session() -> AsyncIterator[AsyncSession]:
    """Async database session scope for callers of the repositories.

    Usage:
        async with get_async_db_session() as db:
            teams = await TeamRepository(db).get_teams_by_division_id(7)

    Repository mutations commit their own unit of work; anything left
    pending on exit is rolled back when an exception escapes.

    Yields:
        Async database session
    """
    session_maker = get_async_sessionmaker()
    async with session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
