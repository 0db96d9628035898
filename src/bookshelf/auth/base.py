"""Shared authentication types and errors."""

from __future__ import annotations

from typing import TypedDict


class TokenClaims(TypedDict):
    """Payload carried by a session token."""

    username: str
    id: str


class AuthenticationError(Exception):
    """Raised when a presented credential cannot be verified."""

    pass
