"""
Note Service.

Business logic layer for notes: listing, creation, editing and the
posted/pinned lifecycle (pin, unpin, trash, restore, purge).

Lifecycle:
    created (posted, unpinned) -> edited -> pinned/unpinned
    -> trashed (unposted, unpinned) -> restored (posted, timestamp refreshed)
    -> purged (record removed, irreversible)

Collaborators are passed in at construction so tests can substitute them.
"""

from collections.abc import Mapping
from typing import Any

from modules.backend.core.config_schema import NotesSchema
from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.security import TokenVerifier, verify_request
from modules.backend.core.utils import utc_now
from modules.backend.models.note import Note
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.owner import OwnerRepository
from modules.backend.schemas.note import NoteCreate
from modules.backend.services.authorization import (
    NOTE_NOT_FOUND,
    NoteAuthorizer,
    requires_note_owner,
)
from modules.backend.services.base import BaseService
from modules.backend.services.validation import validate_note_body


def build_owner_notes_filter(owner_id: str | None, posted: bool | None = None) -> dict[str, Any]:
    """
    Translate owner listing criteria into a store filter.

    Listing always needs an owner scope.

    Raises:
        NotFoundError: If owner_id is not given
    """
    if owner_id is None:
        raise NotFoundError("The requested owner was not found")

    criteria: dict[str, Any] = {"owner_id": owner_id}
    if posted is not None:
        criteria["posted"] = posted
    return criteria


class NoteService(BaseService):
    """
    Service for note business logic.

    Every operation takes the caller's raw Authorization header value.
    Operations on a single note go through ``requires_note_owner``.
    """

    def __init__(
        self,
        notes: NoteRepository,
        owners: OwnerRepository,
        token_verifier: TokenVerifier,
        notes_config: NotesSchema | None = None,
    ) -> None:
        super().__init__()
        self.notes = notes
        self.token_verifier = token_verifier
        self.authorizer = NoteAuthorizer(notes, owners, token_verifier)
        self.config = notes_config or NotesSchema()

    def _validate_body(self, body: Any) -> None:
        validate_note_body(
            body,
            min_length=self.config.body_min_length,
            max_length=self.config.body_max_length,
        ).raise_for_errors()

    async def _update(self, operation: str, note_id: str, changes: Mapping[str, Any]) -> str:
        """
        Apply one atomic update to a note.

        Raises:
            NotFoundError: If the note vanished before the update
        """
        previous = await self._execute_db_operation(
            operation,
            self.notes.find_one_and_update({"id": note_id}, changes),
        )
        if previous is None:
            raise NotFoundError(NOTE_NOT_FOUND)
        return note_id

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @requires_note_owner
    async def get_note(self, token: str | None, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            MalformedIdentifierError: If note_id is not a legal identifier
            NotFoundError: If note not found
            UnauthorizedError: If the caller does not own the note
        """
        note = await self._execute_db_operation("get_note", self.notes.get_by_id(note_id))
        if note is None:
            raise NotFoundError(NOTE_NOT_FOUND)
        return note

    async def get_owner_notes(
        self,
        token: str | None,
        owner_id: str | None,
        posted: bool | None = None,
    ) -> list[Note]:
        """
        List one owner's notes, oldest first.

        Args:
            token: Authorization header value
            owner_id: Owner scope, required
            posted: Restrict to live (True) or trashed (False) notes

        Raises:
            NotFoundError: If owner_id is missing
        """
        verify_request(self.token_verifier, token)
        criteria = build_owner_notes_filter(owner_id, posted)

        self._log_debug("Listing owner notes", **criteria)
        notes = await self._execute_db_operation("get_owner_notes", self.notes.find(criteria))
        return sorted(notes, key=lambda note: note.timestamp)

    async def get_notes(self, token: str | None) -> list[Note]:
        """List every note in the store, in store order."""
        verify_request(self.token_verifier, token)
        return await self._execute_db_operation("get_notes", self.notes.find({}))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_note(self, token: str | None, data: NoteCreate) -> str:
        """
        Create a new note for the caller.

        Returns:
            Identifier assigned by the store

        Raises:
            UnauthorizedError: If data.owner_id is not the caller's owner id
            ValidationError: If the body is missing or out of bounds
        """
        await self.authorizer.authorize_create(token, data)
        self._validate_body(data.body)

        note_id = await self._execute_db_operation(
            "create_note",
            self.notes.insert({
                "owner_id": data.owner_id,
                "body": data.body,
                "timestamp": utc_now(),
                "posted": True,
                "pinned": False,
            }),
        )
        self._log_operation("Note created", note_id=note_id, owner_id=data.owner_id)
        return note_id

    @requires_note_owner
    async def edit_note(self, token: str | None, note_id: str, body: Any) -> str:
        """
        Replace a note's body and refresh its timestamp.

        Raises:
            ValidationError: If the body is missing or out of bounds
        """
        self._validate_body(body)
        self._log_operation("Editing note", note_id=note_id)
        return await self._update("edit_note", note_id, {"body": body, "timestamp": utc_now()})

    @requires_note_owner
    async def pin_note(self, token: str | None, note_id: str) -> str:
        """Pin a note."""
        self._log_operation("Pinning note", note_id=note_id)
        return await self._update("pin_note", note_id, {"pinned": True})

    @requires_note_owner
    async def unpin_note(self, token: str | None, note_id: str) -> str:
        """Unpin a note."""
        self._log_operation("Unpinning note", note_id=note_id)
        return await self._update("unpin_note", note_id, {"pinned": False})

    @requires_note_owner
    async def trash_note(self, token: str | None, note_id: str) -> str:
        """
        Move a note to the trash.

        Clears posted and pinned in a single update, so no reader can see
        a trashed note that is still pinned.
        """
        self._log_operation("Trashing note", note_id=note_id)
        return await self._update("trash_note", note_id, {"posted": False, "pinned": False})

    @requires_note_owner
    async def restore_note(self, token: str | None, note_id: str) -> str:
        """Bring a note back from the trash and refresh its timestamp."""
        self._log_operation("Restoring note", note_id=note_id)
        return await self._update("restore_note", note_id, {"posted": True, "timestamp": utc_now()})

    @requires_note_owner
    async def purge_note(self, token: str | None, note_id: str) -> str:
        """
        Permanently delete a note. Cannot be undone.

        Raises:
            NotFoundError: If the note vanished before the delete
        """
        self._log_operation("Purging note", note_id=note_id)
        removed = await self._execute_db_operation(
            "purge_note",
            self.notes.find_one_and_delete({"id": note_id}),
        )
        if removed is None:
            raise NotFoundError(NOTE_NOT_FOUND)
        return note_id
