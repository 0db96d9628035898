"""
Request logging middleware
"""

import json
import re
import time
from collections.abc import Callable, Mapping
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/graphql"
REQUEST_ID_HEADER = "X-Request-ID"
REDACTED = "[REDACTED]"

SENSITIVE_KEYS = ("password", "token", "secret", "auth", "jwt", "session", "cookie", "credential")

# GraphQL documents carried in a GET query string are never logged verbatim
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables", "extensions")

_OPERATION_RE = re.compile(r"\b(query|mutation|subscription)\s+(\w+)")


def sanitize_query_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy query parameters with credential-looking values redacted."""
    return {
        key: REDACTED if any(word in key.lower() for word in SENSITIVE_KEYS) else value
        for key, value in params.items()
    }


def operation_name_from_query(query: str) -> str:
    """Derive a loggable operation name from a raw GraphQL document.

    Named queries log as their name; mutations and subscriptions are
    prefixed with their kind.
    """
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    match = _OPERATION_RE.search(query)
    if match is None:
        return "unnamed_operation"

    kind, name = match.groups()
    return name if kind == "query" else f"{kind}:{name}"


def _operation_from_payload(payload: Mapping[str, Any]) -> str | None:
    name = payload.get("operationName")
    if isinstance(name, str) and name:
        return name

    query = payload.get("query")
    if isinstance(query, str) and query:
        return operation_name_from_query(query)
    return None


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Name of the GraphQL operation in a request to the GraphQL endpoint."""
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        return _operation_from_payload(request.query_params)

    if request.method == "POST":
        body = await request.body()
        if not body:
            return None
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if isinstance(payload, dict):
            return _operation_from_payload(payload)

    return None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Give each HTTP request a request id and log its start and end."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # The user id is attached later, once the GraphQL context resolves the token
        request_id = set_request_context(request.headers.get(REQUEST_ID_HEADER))
        started = time.perf_counter()

        try:
            params = None
            if request.query_params:
                params = sanitize_query_params(request.query_params)
                if request.url.path == GRAPHQL_PATH:
                    params.update({k: REDACTED for k in GRAPHQL_PAYLOAD_PARAMS if k in params})

            operation = await extract_graphql_operation_name(request)

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=params,
                graphql_operation=operation,
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                graphql_operation=operation,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
