"""
Owner Model.

Account entity that owns notes. Only the subject mapping is used here.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, UUIDMixin


class Owner(UUIDMixin, Base):
    """Owner database model, keyed by the token subject claim."""

    __tablename__ = "owners"

    sub: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )

    def __repr__(self) -> str:
        return f"<Owner(id={self.id}, sub={self.sub!r})>"
