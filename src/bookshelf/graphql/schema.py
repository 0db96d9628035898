"""
Main GraphQL schema definition using Strawberry
"""

import strawberry
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from starlette.requests import HTTPConnection
from strawberry.fastapi import GraphQLRouter

from ..auth.middleware import get_current_user
from ..config import settings
from ..logging import get_logger, set_user_context
from ..pubsub import get_broadcast
from .context import GraphQLContext
from .mutations.root import Mutation
from .queries.root import Query
from .subscriptions.root import Subscription

logger = get_logger(__name__)

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)


class SchemaValidationError(Exception):
    """Raised when the assembled GraphQL schema is unusable."""


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Catches unresolved type references early so the server fails fast
    instead of erroring at request time.

    Raises:
        SchemaValidationError: If the schema is invalid or introspection fails
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise SchemaValidationError(
                f"GraphQL schema validation failed: {'; '.join(error_messages)}"
            )

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise SchemaValidationError(
                f"GraphQL introspection failed: {'; '.join(error_messages)}"
            )

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


async def get_context(connection: HTTPConnection) -> GraphQLContext:
    """Build the resolver context for an HTTP request or WebSocket connection."""
    current_user = await get_current_user(connection.headers.get("authorization"))
    if current_user is not None:
        set_user_context(str(current_user.id))

    return GraphQLContext(current_user=current_user, broadcast=get_broadcast())


def create_graphql_router() -> GraphQLRouter[GraphQLContext, None]:
    """Create a GraphQL router for FastAPI serving HTTP and WebSocket on one path."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.debug else None,
        context_getter=get_context,
    )
