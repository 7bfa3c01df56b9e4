"""
Note Schemas.

Pydantic schemas for note API request/response payloads. Body length rules
are not encoded here; they are enforced by services.validation so that a
bad body yields a 400 with field-level reasons.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    owner_id: str = Field(
        ...,
        description="Identifier of the owning account",
        examples=["0b7c7a8e-5b8e-4c55-9a39-3a2f0e6f1c11"],
    )
    body: str | None = Field(
        default=None,
        description="Note text, 2 to 300 characters",
        examples=["Office hours moved to 3pm."],
    )


class NoteEdit(BaseModel):
    """Schema for replacing the body of an existing note."""

    body: str | None = Field(
        default=None,
        description="New note text, 2 to 300 characters",
    )


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    owner_id: str = Field(description="Owning account identifier")
    body: str = Field(description="Note text")
    timestamp: datetime = Field(description="Last modification time")
    posted: bool = Field(description="False when the note is in the trash")
    pinned: bool = Field(description="Whether the note is pinned")

    model_config = ConfigDict(from_attributes=True)


class NoteIdResponse(BaseModel):
    """Identifier of the note an operation was applied to."""

    id: str
