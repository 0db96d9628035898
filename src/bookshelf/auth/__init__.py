"""Authentication for Bookshelf: password hashing and session tokens."""

from .base import AuthenticationError, TokenClaims
from .middleware import extract_bearer_token, get_current_user
from .passwords import hash_password, verify_password
from .tokens import JWTTokenService, get_token_service

__all__ = [
    "AuthenticationError",
    "JWTTokenService",
    "TokenClaims",
    "extract_bearer_token",
    "get_current_user",
    "get_token_service",
    "hash_password",
    "verify_password",
]
