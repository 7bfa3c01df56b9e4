"""
Note Model.

Persisted record shape: {id, owner_id, body, timestamp, posted, pinned}.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.core.utils import utc_now
from modules.backend.models.base import Base, UUIDMixin


class Note(UUIDMixin, Base):
    """
    Note database model.

    ``posted`` False means the note sits in the trash. ``pinned`` is
    cleared whenever the note is trashed. ``owner_id`` is written once at
    insert and never updated; there is no foreign key to owners.
    """

    __tablename__ = "notes"

    owner_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )
    posted: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
    )
    pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id!r}, posted={self.posted})>"
