from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select

from ...auth.passwords import verify_password
from ...auth.tokens import get_token_service
from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger
from ..access_control import get_current_user_from_info
from ..errors import UserInputError
from .user import user_from_model

if TYPE_CHECKING:
    from ..types.user import Token, User

logger = get_logger(__name__)


async def resolve_current_user(info: strawberry.Info) -> User | None:
    user = get_current_user_from_info(info)
    if user is None:
        return None
    return user_from_model(user)


async def login(info: strawberry.Info, username: str, password: str) -> Token:
    """
    Verify credentials and issue a session token.

    An unknown username is a user-input error; a wrong password is a plain
    error. Neither returns a token.
    """
    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.username == username))
        user = result.scalars().first()

    if user is None:
        logger.info("Login with unknown username", username=username)
        raise UserInputError("wrong credentials")

    if not await verify_password(password, user.password_hash):
        logger.info("Login with incorrect password", user_id=str(user.id))
        raise RuntimeError("Incorrect password")

    from ..types.user import Token as TokenType

    token = get_token_service().issue_token(user.username, user.id)
    logger.info("User logged in", user_id=str(user.id))
    return TokenType(value=token)
