"""JWT session tokens for users authenticated by this service."""

from __future__ import annotations

from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from ..config import settings
from ..logging import get_logger
from .base import AuthenticationError, TokenClaims

logger = get_logger(__name__)


class JWTTokenService:
    """Signs and verifies session tokens carrying a username and user id.

    Tokens are deterministic for a given payload: no expiry, issuer or
    audience claims are added.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def issue_token(self, username: str, user_id: UUID | str) -> str:
        """Issue a signed token for a user."""
        payload: TokenClaims = {"username": username, "id": str(user_id)}
        return jwt.encode(dict(payload), self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenClaims:
        """Verify a token signature and return its claims."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except InvalidTokenError as e:
            logger.warning("JWT token validation failed", error=str(e))
            raise AuthenticationError("Invalid token") from e

        username = payload.get("username")
        user_id = payload.get("id")
        if not isinstance(username, str) or not isinstance(user_id, str):
            raise AuthenticationError("Token is missing the username or id claim")

        return TokenClaims(username=username, id=user_id)


_service: JWTTokenService | None = None


def get_token_service() -> JWTTokenService:
    """Return the token service built from settings (cached)."""
    global _service
    if _service is None:
        if not settings.jwt_secret:
            raise ValueError(
                "JWT secret key is required. Set BOOKSHELF_JWT_SECRET in the environment."
            )
        _service = JWTTokenService(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
    return _service


def reset_token_service() -> None:
    """Clear the cached token service so the next call re-reads settings."""
    global _service
    _service = None
