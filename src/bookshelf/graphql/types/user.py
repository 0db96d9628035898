"""
User and session token GraphQL type definitions
"""

import strawberry


@strawberry.type
class User:
    """User type for GraphQL API. The password hash is never exposed."""

    username: str
    favorite_genre: str
    id: strawberry.ID


@strawberry.type
class Token:
    """Signed session token returned by login."""

    value: str
