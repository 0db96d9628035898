"""
Database models for Bookshelf (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class ModelValidationError(ValueError):
    """Raised when a model attribute is assigned a value the store would reject."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _require_text(model: str, field: str, value: str | None) -> str:
    if value is None or not value.strip():
        raise ModelValidationError(f"{model} validation failed: {field} is required")
    return value


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Authors(Base):
    __tablename__ = "authors"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="authors_pkey"),
        UniqueConstraint("name", name="authors_name_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    born: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=_utcnow)

    books: Mapped[list["Books"]] = relationship("Books", uselist=True, back_populates="author")

    @validates("name")
    def validate_name(self, key: str, value: str | None) -> str:
        return _require_text("Author", key, value)


class Books(Base):
    __tablename__ = "books"
    __table_args__ = (
        ForeignKeyConstraint(
            ["author_id"],
            ["authors.id"],
            ondelete="CASCADE",
            name="books_author_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="books_pkey"),
        Index("idx_books_author", "author_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    published: Mapped[int | None] = mapped_column(Integer)
    author_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    genres: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=_utcnow)

    author: Mapped["Authors"] = relationship("Authors", back_populates="books")

    @validates("title")
    def validate_title(self, key: str, value: str | None) -> str:
        return _require_text("Book", key, value)

    @validates("genres")
    def validate_genres(self, key: str, value: list[str] | None) -> list[str]:
        if value is None:
            raise ModelValidationError(f"Book validation failed: {key} is required")
        return list(value)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("username", name="users_username_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    favorite_genre: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=_utcnow)

    @validates("username", "favorite_genre")
    def validate_required(self, key: str, value: str | None) -> str:
        return _require_text("User", key, value)


target_metadata = Base.metadata

__all__ = [
    "Authors",
    "Base",
    "Books",
    "ModelValidationError",
    "Users",
    "target_metadata",
]
