"""
Tests that the published GraphQL schema keeps its client-facing shape
"""

import pytest

from bookshelf.graphql.schema import schema, validate_schema


@pytest.fixture(scope="module")
def sdl() -> str:
    return schema.as_str()


@pytest.mark.unit
@pytest.mark.parametrize(
    "line",
    [
        # Query
        "bookCount: Int!",
        "authorCount: Int!",
        "allBooks(author: String, genre: String): [Book!]!",
        "AllAuthors: [Author!]!",
        "me: User",
        # Mutation
        "addBook(title: String!, author: String!, published: Int, genres: [String!]!): Book",
        "editAuthor(name: String!, born: Int!): Author",
        "createUser(username: String!, password: String!, favoriteGenre: String!): User",
        "login(username: String!, password: String!): Token",
        # Subscription
        "bookAdded: Book!",
    ],
)
def test_root_fields(sdl, line):
    assert f"  {line}\n" in sdl


@pytest.mark.unit
@pytest.mark.parametrize(
    "type_name,fields",
    [
        (
            "Book",
            ["title: String!", "published: Int", "author: Author!", "genres: [String!]!", "id: ID!"],
        ),
        ("Author", ["name: String!", "born: Int", "id: ID!", "bookCount: Int"]),
        ("User", ["username: String!", "favoriteGenre: String!", "id: ID!"]),
        ("Token", ["value: String!"]),
    ],
)
def test_object_types(sdl, type_name, fields):
    expected = "type " + type_name + " {\n" + "".join(f"  {f}\n" for f in fields) + "}"

    assert expected in sdl


@pytest.mark.unit
def test_password_hash_is_not_exposed(sdl):
    assert "password_hash" not in sdl
    assert "passwordHash" not in sdl


@pytest.mark.unit
def test_validate_schema_passes():
    validate_schema()
