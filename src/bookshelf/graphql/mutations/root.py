"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.author import Author
from ..types.book import Book
from ..types.user import Token, User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Catalog mutations
    @strawberry.mutation(name="addBook")
    async def add_book(
        self,
        info: strawberry.Info,
        *,
        title: str,
        author: str,
        published: int | None = strawberry.UNSET,
        genres: list[str],
    ) -> Book | None:
        """Add a book, creating its author on first mention."""
        from ..resolvers.book import add_book

        return await add_book(
            info,
            title=title,
            author=author,
            published=None if published is strawberry.UNSET else published,
            genres=genres,
        )

    @strawberry.mutation(name="editAuthor")
    async def edit_author(self, info: strawberry.Info, name: str, born: int) -> Author | None:
        """Set an author's birth year."""
        from ..resolvers.author import edit_author

        return await edit_author(info, name, born)

    # Account mutations
    @strawberry.mutation(name="createUser")
    async def create_user(
        self, info: strawberry.Info, username: str, password: str, favorite_genre: str
    ) -> User | None:
        """Register a new user."""
        from ..resolvers.user import create_user

        return await create_user(info, username, password, favorite_genre)

    @strawberry.mutation
    async def login(self, info: strawberry.Info, username: str, password: str) -> Token | None:
        """Exchange a username and password for a session token."""
        from ..resolvers.auth import login

        return await login(info, username, password)
