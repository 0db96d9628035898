"""
Book GraphQL type definitions
"""

import strawberry

from .author import Author


@strawberry.type
class Book:
    """Book type for GraphQL API."""

    title: str
    published: int | None
    author: Author
    genres: list[str]
    id: strawberry.ID
