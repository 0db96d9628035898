from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ...database.connection import get_async_session
from ...dbmodels import Authors, Books, ModelValidationError
from ...logging import get_logger
from ..access_control import require_current_user
from ..errors import UserInputError
from .author import author_from_model

if TYPE_CHECKING:
    from ..types.book import Book

logger = get_logger(__name__)

BOOK_ADDED = "BOOK_ADDED"


def book_from_model(book: Books) -> Book:
    """Convert a book row (with its author loaded) to its GraphQL type."""
    from ..types.book import Book as BookType

    return BookType(
        title=book.title,
        published=book.published,
        author=author_from_model(book.author),
        genres=list(book.genres),
        id=strawberry.ID(str(book.id)),
    )


def filter_books(
    books: Sequence[Books], author: str | None = None, genre: str | None = None
) -> list[Books]:
    """
    Keep the books matching every filter that is given.

    No filters keeps everything; author matches the author's name exactly and
    genre matches any entry of the book's genre list.
    """
    if not author and not genre:
        return list(books)

    return [
        book
        for book in books
        if (not author or book.author.name == author) and (not genre or genre in book.genres)
    ]


# Query resolvers
async def resolve_book_count(info: strawberry.Info) -> int:
    async with get_async_session() as session:
        result = await session.execute(select(func.count()).select_from(Books))
        return result.scalar_one()


async def resolve_all_books(
    info: strawberry.Info, author: str | None, genre: str | None
) -> list[Book]:
    """
    Resolve every book, filtered in memory by author name and/or genre.

    The whole table is loaded with authors joined; results keep the store's
    natural order.
    """
    async with get_async_session() as session:
        stmt = select(Books).options(selectinload(Books.author))
        result = await session.execute(stmt)
        books = result.scalars().all()

    return [book_from_model(book) for book in filter_books(books, author, genre)]


# Mutations
async def add_book(
    info: strawberry.Info,
    *,
    title: str,
    author: str,
    published: int | None,
    genres: list[str],
) -> Book:
    """
    Add a book, creating its author first when the name is new.

    Requires authentication. Store validation failures are reported as
    user-input errors and nothing is saved. The created book is published on
    the BOOK_ADDED channel once the transaction has committed.
    """
    current_user = require_current_user(info)
    invalid_args = {
        "title": title,
        "author": author,
        "published": published,
        "genres": genres,
    }

    async with get_async_session() as session:
        result = await session.execute(select(Authors).where(Authors.name == author))
        db_author = result.scalar_one_or_none()

        try:
            if db_author is None:
                db_author = Authors(name=author)
                session.add(db_author)
                await session.flush()
                logger.info("Author created", author_id=str(db_author.id), name=author)

            db_book = Books(
                title=title,
                published=published,
                author=db_author,
                genres=genres,
            )
            session.add(db_book)
            await session.flush()
        except (ModelValidationError, IntegrityError) as e:
            logger.info("Book rejected by store", error=str(e), title=title)
            raise UserInputError.from_store_error(e, invalid_args) from e

        book = book_from_model(db_book)

    logger.info(
        "Book created",
        book_id=str(book.id),
        title=title,
        author=author,
        user_id=str(current_user.id),
    )
    await info.context.broadcast.publish(BOOK_ADDED, book)
    return book


# Subscriptions
async def subscribe_book_added(info: strawberry.Info) -> AsyncGenerator[Book, None]:
    """Yield every book published after the subscriber registers."""
    async with info.context.broadcast.subscribe(BOOK_ADDED) as subscriber:
        async for book in subscriber:
            yield book
