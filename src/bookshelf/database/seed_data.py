"""
Reusable seed data functions for database initialization.

Seeds a small sample catalog so a fresh development database has something
to query.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Authors, Books
from ..logging import get_logger

logger = get_logger(__name__)

SAMPLE_AUTHORS: list[dict] = [
    {"name": "Robert Martin", "born": 1952},
    {"name": "Martin Fowler", "born": 1963},
    {"name": "Fyodor Dostoevsky", "born": 1821},
    {"name": "Joshua Kerievsky", "born": None},
    {"name": "Sandi Metz", "born": None},
]

SAMPLE_BOOKS: list[dict] = [
    {
        "title": "Clean Code",
        "published": 2008,
        "author": "Robert Martin",
        "genres": ["refactoring"],
    },
    {
        "title": "Agile software development",
        "published": 2002,
        "author": "Robert Martin",
        "genres": ["agile", "patterns", "design"],
    },
    {
        "title": "Refactoring, edition 2",
        "published": 2018,
        "author": "Martin Fowler",
        "genres": ["refactoring"],
    },
    {
        "title": "Refactoring to patterns",
        "published": 2008,
        "author": "Joshua Kerievsky",
        "genres": ["refactoring", "patterns"],
    },
    {
        "title": "Practical Object-Oriented Design, An Agile Primer Using Ruby",
        "published": 2012,
        "author": "Sandi Metz",
        "genres": ["refactoring", "design"],
    },
    {
        "title": "Crime and punishment",
        "published": 1866,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "crime"],
    },
    {
        "title": "The Demon",
        "published": 1872,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "revolution"],
    },
]


async def ensure_author(
    db: AsyncSession, name: str, born: int | None = None
) -> tuple[Authors, bool]:
    """
    Ensure an author exists, returning the existing row when the name is taken.

    Returns:
        Tuple of (author, whether it was created)
    """
    result = await db.execute(select(Authors).where(Authors.name == name))
    existing = result.scalar_one_or_none()
    if existing:
        logger.debug("Author already exists", author_id=str(existing.id), name=name)
        return existing, False

    author = Authors(name=name, born=born)
    db.add(author)
    await db.flush()
    logger.info("Author created", author_id=str(author.id), name=name)
    return author, True


async def seed_sample_catalog(db: AsyncSession) -> tuple[int, int]:
    """
    Insert the sample authors and books.

    Authors are matched by name and books by title plus author, so running
    the seed twice adds nothing.

    Returns:
        Tuple of (authors created, books created)
    """
    authors: dict[str, Authors] = {}
    authors_created = 0
    for data in SAMPLE_AUTHORS:
        author, created = await ensure_author(db, data["name"], data["born"])
        authors[data["name"]] = author
        authors_created += int(created)

    books_created = 0
    for data in SAMPLE_BOOKS:
        author = authors[data["author"]]
        result = await db.execute(
            select(Books.id).where(Books.title == data["title"], Books.author_id == author.id)
        )
        if result.scalar_one_or_none() is not None:
            continue

        db.add(
            Books(
                title=data["title"],
                published=data["published"],
                author=author,
                genres=data["genres"],
            )
        )
        books_created += 1

    await db.flush()
    logger.info(
        "Sample catalog seeded",
        authors_created=authors_created,
        books_created=books_created,
    )
    return authors_created, books_created
