"""
GraphQL errors raised by resolvers

Both carry an `extensions.code` so clients can tell them apart from
unclassified failures.
"""

from typing import Any

from graphql import GraphQLError


class AuthenticationRequiredError(GraphQLError):
    """An operation that needs a logged-in user was called anonymously."""

    def __init__(self, message: str = "not authenticated") -> None:
        super().__init__(message, extensions={"code": "UNAUTHENTICATED"})


class UserInputError(GraphQLError):
    """Arguments were rejected by the store or did not match any record."""

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None) -> None:
        extensions: dict[str, Any] = {"code": "BAD_USER_INPUT"}
        if invalid_args is not None:
            extensions["invalidArgs"] = invalid_args
        super().__init__(message, extensions=extensions)
        self.invalid_args = invalid_args

    @classmethod
    def from_store_error(
        cls, error: Exception, invalid_args: dict[str, Any] | None = None
    ) -> "UserInputError":
        """Wrap a model validation or integrity failure raised while saving."""
        # IntegrityError keeps the driver message on .orig; str() adds the SQL too
        message = str(getattr(error, "orig", None) or error)
        return cls(message, invalid_args=invalid_args)
