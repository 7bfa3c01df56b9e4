"""
Owner Repository.

Owner directory backed by the owners table: resolves a token subject to
the owning account's identifier.
"""

from sqlalchemy import select

from modules.backend.models.owner import Owner
from modules.backend.repositories.base import BaseRepository


class OwnerRepository(BaseRepository[Owner]):
    """Repository for Owner records."""

    model = Owner

    async def owner_id_for_subject(self, subject: str) -> str | None:
        """Return the owner identifier registered for ``subject``, if any."""
        result = await self.session.execute(
            select(Owner.id).where(Owner.sub == subject)
        )
        return result.scalar_one_or_none()
