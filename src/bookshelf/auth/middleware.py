"""Resolve the current user from an Authorization header."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException

from ..database.connection import get_async_session
from ..dbmodels import Users
from ..logging import get_logger
from .base import AuthenticationError
from .tokens import get_token_service

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a `Bearer <token>` header, or None for anything else."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX) :]


async def get_current_user(authorization: str | None) -> Users | None:
    """
    Load the user a bearer token was issued to.

    A missing or non-bearer header means an anonymous request. A bearer token
    that fails verification is rejected with HTTP 401; the request is not
    executed.

    Args:
        authorization: Raw Authorization header value

    Returns:
        The user row, or None when the request is anonymous or the user is gone
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None

    token_service = get_token_service()
    try:
        claims = token_service.verify_token(token)
        user_id = UUID(claims["id"])
    except (AuthenticationError, ValueError) as e:
        logger.warning("Authentication failed", error=str(e))
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    async with get_async_session() as session:
        user = await session.get(Users, user_id)

    if user is None:
        logger.info("Token refers to an unknown user", user_id=str(user_id))
    return user
