from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy.exc import IntegrityError

from ...auth.passwords import hash_password
from ...database.connection import get_async_session
from ...dbmodels import ModelValidationError, Users
from ...logging import get_logger
from ..errors import UserInputError

if TYPE_CHECKING:
    from ..types.user import User

logger = get_logger(__name__)


def user_from_model(user: Users) -> User:
    """Convert a user row to its GraphQL type."""
    from ..types.user import User as UserType

    return UserType(
        username=user.username,
        favorite_genre=user.favorite_genre,
        id=strawberry.ID(str(user.id)),
    )


async def create_user(
    info: strawberry.Info, username: str, password: str, favorite_genre: str
) -> User:
    """
    Register a user with a bcrypt-hashed password.

    Duplicate usernames and empty fields are rejected by the store and
    reported as user-input errors.
    """
    invalid_args = {
        "username": username,
        "password": "[REDACTED]",
        "favoriteGenre": favorite_genre,
    }
    password_hash = await hash_password(password)

    async with get_async_session() as session:
        try:
            db_user = Users(
                username=username,
                password_hash=password_hash,
                favorite_genre=favorite_genre,
            )
            session.add(db_user)
            await session.flush()
        except (ModelValidationError, IntegrityError) as e:
            logger.info("User rejected by store", error=str(e), username=username)
            raise UserInputError.from_store_error(e, invalid_args) from e

        logger.info("User created", user_id=str(db_user.id), username=username)
        return user_from_model(db_user)
