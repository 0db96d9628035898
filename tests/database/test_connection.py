"""Tests for database URL handling and session lifecycle."""

import pytest
from sqlalchemy import func, select

from bookshelf.database.connection import (
    get_async_session,
    is_memory_sqlite,
    ping_database,
    safe_url,
    to_async_url,
)
from bookshelf.dbmodels import Authors


@pytest.mark.unit
@pytest.mark.parametrize(
    "url,expected",
    [
        ("postgresql://u:p@db:5432/shelf", "postgresql+asyncpg://u:p@db:5432/shelf"),
        ("postgres://u:p@db/shelf", "postgresql+asyncpg://u:p@db/shelf"),
        ("sqlite:///./shelf.db", "sqlite+aiosqlite:///./shelf.db"),
        ("sqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ("postgresql+asyncpg://u@db/shelf", "postgresql+asyncpg://u@db/shelf"),
    ],
)
def test_to_async_url(url, expected):
    assert to_async_url(url) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "url,expected",
    [
        ("sqlite+aiosqlite:///:memory:", True),
        ("sqlite+aiosqlite://", True),
        ("sqlite+aiosqlite:///./shelf.db", False),
        ("postgresql+asyncpg://u@db/shelf", False),
    ],
)
def test_is_memory_sqlite(url, expected):
    assert is_memory_sqlite(url) is expected


@pytest.mark.unit
def test_safe_url_hides_password():
    rendered = safe_url("postgresql://bookshelf:hunter2@db/shelf")

    assert "hunter2" not in rendered
    assert "bookshelf" in rendered


@pytest.mark.requires_db
class TestSessions:
    @pytest.mark.asyncio
    async def test_ping(self, database):
        assert await ping_database() is None

    @pytest.mark.asyncio
    async def test_commits_on_success(self, database):
        async with get_async_session() as session:
            session.add(Authors(name="Sandi Metz"))

        async with get_async_session() as session:
            count = (await session.execute(select(func.count()).select_from(Authors))).scalar_one()
        assert count == 1

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, database):
        with pytest.raises(RuntimeError):
            async with get_async_session() as session:
                session.add(Authors(name="Sandi Metz"))
                await session.flush()
                raise RuntimeError("abort")

        async with get_async_session() as session:
            count = (await session.execute(select(func.count()).select_from(Authors))).scalar_one()
        assert count == 0
