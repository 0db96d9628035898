"""
Root GraphQL subscription definitions
"""

from collections.abc import AsyncGenerator

import strawberry

from ..types.book import Book


@strawberry.type
class Subscription:
    """Root GraphQL subscription type."""

    @strawberry.subscription(name="bookAdded")
    async def book_added(self, info: strawberry.Info) -> AsyncGenerator[Book, None]:
        """Receive every book added after the subscription starts."""
        from ..resolvers.book import subscribe_book_added

        async for book in subscribe_book_added(info):
            yield book
