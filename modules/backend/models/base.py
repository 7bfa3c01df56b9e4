"""
SQLAlchemy Base Model.

Base class for all database models with common fields and utilities.
"""

from typing import Any
from uuid import uuid4

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    def to_record(self) -> dict[str, Any]:
        """Return a plain dict of column values, detached from the session."""
        return {
            attr.key: getattr(self, attr.key)
            for attr in inspect(self).mapper.column_attrs
        }


class UUIDMixin:
    """Mixin that adds a store-assigned UUID primary key."""

    id: Mapped[str] = mapped_column(
        primary_key=True,
        default=lambda: str(uuid4()),
    )
