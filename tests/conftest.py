"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any

# Settings are read once at import time, so these must be set before bookshelf loads
os.environ.setdefault("BOOKSHELF_JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("BOOKSHELF_BCRYPT_ROUNDS", "4")
os.environ.setdefault("BOOKSHELF_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("BOOKSHELF_DEBUG", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

TEST_DATABASE_URL = "sqlite:///:memory:"

GraphQLCaller = Callable[..., Awaitable[dict[str, Any]]]


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[None, None]:
    """Fresh in-memory database with every table created."""
    from bookshelf.database.connection import (
        create_tables,
        dispose_database,
        init_database,
        reset_database,
    )

    reset_database()
    init_database(TEST_DATABASE_URL, force_reinit=True)
    await create_tables()

    yield

    await dispose_database()
    reset_database()


@pytest.fixture(scope="function")
def broadcast():
    """Process-wide broadcaster, replaced for each test."""
    from bookshelf.pubsub import get_broadcast, reset_broadcast

    reset_broadcast()
    yield get_broadcast()
    reset_broadcast()


@pytest.fixture(scope="function")
def token_service():
    """Token service built from the test settings."""
    from bookshelf.auth.tokens import get_token_service, reset_token_service

    reset_token_service()
    yield get_token_service()
    reset_token_service()


@pytest_asyncio.fixture(scope="function")
async def client(database: None, broadcast, token_service) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to a freshly created app."""
    from bookshelf.api.app import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture(scope="function")
def graphql(client: AsyncClient) -> GraphQLCaller:
    """POST a GraphQL document and return the decoded response body."""

    async def execute(
        query: str, variables: dict[str, Any] | None = None, token: str | None = None
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = await client.post(
            "/graphql", json={"query": query, "variables": variables or {}}, headers=headers
        )
        assert response.status_code == 200, response.text
        return response.json()

    return execute


CREATE_USER = """
mutation CreateUser($username: String!, $password: String!, $favoriteGenre: String!) {
  createUser(username: $username, password: $password, favoriteGenre: $favoriteGenre) {
    id
    username
    favoriteGenre
  }
}
"""

LOGIN = """
mutation Login($username: String!, $password: String!) {
  login(username: $username, password: $password) {
    value
  }
}
"""


@pytest_asyncio.fixture(scope="function")
async def user_token(graphql: GraphQLCaller) -> str:
    """Register a user through the API and return a session token for it."""
    created = await graphql(
        CREATE_USER,
        {"username": "reader", "password": "sekret", "favoriteGenre": "refactoring"},
    )
    assert "errors" not in created, created

    logged_in = await graphql(LOGIN, {"username": "reader", "password": "sekret"})
    assert "errors" not in logged_in, logged_in
    return logged_in["data"]["login"]["value"]


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
