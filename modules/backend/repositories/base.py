"""
Base Repository.

Collection-style data access over a SQLAlchemy async session. Every
repository exposes the same five primitives: find, find_one, insert,
find_one_and_update and find_one_and_delete. Filters are mappings of
field name to required value, combined with AND; an empty filter
matches every record.

Usage:
    class NoteRepository(BaseRepository[Note]):
        model = Note

    previous = await repo.find_one_and_update({"id": note_id}, {"pinned": True})
    if previous is None:
        raise NotFoundError(...)
"""

from collections.abc import Mapping
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from modules.backend.core.exceptions import MalformedIdentifierError
from modules.backend.core.logging import get_logger
from modules.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

Filter = Mapping[str, Any]


def parse_identifier(value: Any) -> str:
    """
    Validate that a value is a legal store identifier.

    Store identifiers are canonical UUID strings.

    Returns:
        The identifier in canonical lowercase form

    Raises:
        MalformedIdentifierError: If the value is not a parseable UUID
    """
    if isinstance(value, UUID):
        return str(value)
    try:
        return str(UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        raise MalformedIdentifierError()


class BaseRepository(Generic[ModelType]):
    """
    Base repository with collection-style primitives.

    Subclasses should set the model class:

        class OwnerRepository(BaseRepository[Owner]):
            model = Owner
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _select(self, filter: Filter | None) -> Select:
        stmt = select(self.model)
        for field, value in (filter or {}).items():
            stmt = stmt.where(self._column(field) == value)
        return stmt

    def _column(self, field: str) -> Any:
        if field not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no field {field!r}")
        return getattr(self.model, field)

    async def find(self, filter: Filter | None = None) -> list[ModelType]:
        """Return every record matching the filter."""
        result = await self.session.execute(self._select(filter))
        return list(result.scalars().all())

    async def find_one(self, filter: Filter) -> ModelType | None:
        """Return the first record matching the filter, or None."""
        result = await self.session.execute(self._select(filter).limit(1))
        return result.scalars().first()

    async def insert(self, values: Mapping[str, Any]) -> str:
        """Insert a new record and return its store-assigned identifier."""
        for field in values:
            self._column(field)
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        return instance.id

    async def find_one_and_update(
        self,
        filter: Filter,
        changes: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """
        Atomically apply ``changes`` to the first record matching ``filter``.

        The row is locked FOR UPDATE (on backends that support it) and all
        changes are written in a single UPDATE statement.

        Returns:
            Snapshot of the record as it was before the update, or None
            when nothing matched
        """
        result = await self.session.execute(
            self._select(filter).limit(1).with_for_update()
        )
        instance = result.scalars().first()
        if instance is None:
            return None

        previous = instance.to_record()
        values = {self._column(field).key: value for field, value in changes.items()}
        await self.session.execute(
            update(self.model)
            .where(self.model.id == previous["id"])
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return previous

    async def find_one_and_delete(self, filter: Filter) -> dict[str, Any] | None:
        """
        Remove the first record matching ``filter``.

        Returns:
            Snapshot of the removed record, or None when nothing matched
        """
        result = await self.session.execute(
            self._select(filter).limit(1).with_for_update()
        )
        instance = result.scalars().first()
        if instance is None:
            return None

        removed = instance.to_record()
        await self.session.execute(
            delete(self.model)
            .where(self.model.id == removed["id"])
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return removed
