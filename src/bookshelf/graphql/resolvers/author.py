from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ...database.connection import get_async_session
from ...dbmodels import Authors, Books, ModelValidationError
from ...logging import get_logger
from ..access_control import require_current_user
from ..errors import UserInputError

if TYPE_CHECKING:
    from ..types.author import Author

logger = get_logger(__name__)


def author_from_model(author: Authors) -> Author:
    """Convert an author row to its GraphQL type."""
    from ..types.author import Author as AuthorType

    return AuthorType(
        name=author.name,
        born=author.born,
        id=strawberry.ID(str(author.id)),
    )


# Query resolvers
async def resolve_author_count(info: strawberry.Info) -> int:
    async with get_async_session() as session:
        result = await session.execute(select(func.count()).select_from(Authors))
        return result.scalar_one()


async def resolve_all_authors(info: strawberry.Info) -> list[Author]:
    async with get_async_session() as session:
        result = await session.execute(select(Authors))
        authors = result.scalars().all()

    return [author_from_model(author) for author in authors]


# Author field resolvers
async def resolve_author_book_count(author: Author, info: strawberry.Info) -> int:
    """
    Count the books whose author carries this author's name.

    Computed on every read so it always reflects the current catalog.
    """
    async with get_async_session() as session:
        stmt = (
            select(func.count(Books.id))
            .join(Authors, Books.author_id == Authors.id)
            .where(Authors.name == author.name)
        )
        result = await session.execute(stmt)
        return result.scalar_one()


# Mutations
async def edit_author(info: strawberry.Info, name: str, born: int) -> Author:
    """
    Set the birth year of an existing author.

    Requires authentication. An unknown author name is reported as a
    user-input error.
    """
    current_user = require_current_user(info)
    invalid_args = {"name": name, "born": born}

    async with get_async_session() as session:
        result = await session.execute(select(Authors).where(Authors.name == name))
        db_author = result.scalar_one_or_none()

        if db_author is None:
            logger.info("Author not found", name=name)
            raise UserInputError(f"Author '{name}' not found", invalid_args=invalid_args)

        try:
            db_author.born = born
            await session.flush()
        except (ModelValidationError, IntegrityError) as e:
            raise UserInputError.from_store_error(e, invalid_args) from e

        logger.info(
            "Author updated",
            author_id=str(db_author.id),
            born=born,
            user_id=str(current_user.id),
        )
        return author_from_model(db_author)
