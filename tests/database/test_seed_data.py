"""Tests for the sample catalog seed."""

import pytest
from sqlalchemy import func, select

from bookshelf.database.connection import get_async_session
from bookshelf.database.seed_data import (
    SAMPLE_AUTHORS,
    SAMPLE_BOOKS,
    ensure_author,
    seed_sample_catalog,
)
from bookshelf.dbmodels import Authors, Books


async def count(model) -> int:
    async with get_async_session() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.requires_db
class TestSeedSampleCatalog:
    @pytest.mark.asyncio
    async def test_seeds_every_sample_row(self, database):
        async with get_async_session() as session:
            created = await seed_sample_catalog(session)

        assert created == (len(SAMPLE_AUTHORS), len(SAMPLE_BOOKS))
        assert await count(Authors) == 5
        assert await count(Books) == 7

    @pytest.mark.asyncio
    async def test_second_run_adds_nothing(self, database):
        async with get_async_session() as session:
            await seed_sample_catalog(session)
        async with get_async_session() as session:
            created = await seed_sample_catalog(session)

        assert created == (0, 0)
        assert await count(Books) == 7

    @pytest.mark.asyncio
    async def test_existing_author_is_kept(self, database):
        async with get_async_session() as session:
            session.add(Authors(name="Robert Martin", born=None))

        async with get_async_session() as session:
            authors_created, _ = await seed_sample_catalog(session)

        assert authors_created == len(SAMPLE_AUTHORS) - 1
        async with get_async_session() as session:
            author = (
                await session.execute(select(Authors).where(Authors.name == "Robert Martin"))
            ).scalar_one()
        assert author.born is None


@pytest.mark.requires_db
class TestEnsureAuthor:
    @pytest.mark.asyncio
    async def test_returns_existing_row(self, database):
        async with get_async_session() as session:
            first, created_first = await ensure_author(session, "Sandi Metz")
            second, created_second = await ensure_author(session, "Sandi Metz", 1967)

        assert created_first is True
        assert created_second is False
        assert first.id == second.id
