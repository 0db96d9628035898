"""
Async engine and session management.

One engine is shared by the whole process. Plain ``postgresql://`` and
``sqlite://`` URLs are accepted and switched to their asyncio drivers.
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """Database URL from the environment, falling back to settings."""
    return os.getenv("BOOKSHELF_DATABASE_URL") or settings.database_url


def to_async_url(db_url: str) -> str:
    """Map a plain database URL onto the asyncio driver for its dialect."""
    scheme, sep, rest = db_url.partition("://")
    if not sep or "+" in scheme:
        return db_url
    return f"{ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


def is_memory_sqlite(async_url: str) -> bool:
    url = make_url(async_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def safe_url(db_url: str) -> str:
    """URL with the password hidden, for logs."""
    try:
        return make_url(db_url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<unparseable database url>"


def _engine_options(async_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.sql_echo}
    if is_memory_sqlite(async_url):
        # Every session must see the same in-memory database
        options.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
    elif not async_url.startswith("sqlite"):
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
        )
    return options


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Create the shared engine and session factory.

    Calling it again is a no-op unless a URL is given or ``force_reinit`` is set.
    """
    global _engine, _sessionmaker

    if _engine is not None and database_url is None and not force_reinit:
        return

    db_url = database_url or get_database_url()
    async_url = to_async_url(db_url)

    _engine = create_async_engine(async_url, **_engine_options(async_url))
    _sessionmaker = async_sessionmaker(_engine, autoflush=False, expire_on_commit=False)
    logger.info("Database initialized", database_url=safe_url(db_url))


def reset_database() -> None:
    """Forget the shared engine. Call dispose_database() first to close it."""
    global _engine, _sessionmaker
    _engine = None
    _sessionmaker = None


async def dispose_database() -> None:
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")


def get_async_engine() -> AsyncEngine:
    if _engine is None:
        init_database()
    assert _engine is not None
    return _engine


async def ping_database() -> str | None:
    """Run a trivial query; return None when it works, else a readable reason."""
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        message = str(e)
        if "Connection refused" in message or "could not connect" in message:
            return f"Cannot reach the database server: {message}"
        if "password authentication failed" in message:
            return f"Database credentials were rejected: {message}"
        return f"{type(e).__name__}: {message}"
    return None


async def create_tables() -> None:
    """Create every table that does not exist yet."""
    from ..dbmodels import target_metadata

    async with get_async_engine().begin() as conn:
        await conn.run_sync(target_metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(target_metadata.tables))


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Session from the shared pool, committed on success and rolled back on error."""
    if _sessionmaker is None:
        init_database()
    assert _sessionmaker is not None

    async with _sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
