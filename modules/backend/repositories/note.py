"""
Note Repository.

Data access layer for notes. The generic collection primitives come from
BaseRepository; this module only adds note-specific lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.note import Note
from modules.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """Repository for Note records."""

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_id(self, note_id: str) -> Note | None:
        """Point lookup by store identifier."""
        return await self.find_one({"id": note_id})
