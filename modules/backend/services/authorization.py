"""
Note Authorization.

Ownership checks for notes. A caller may only create notes for the owner
their token resolves to, and may only read or change a specific note
when they own it.

Every service method that addresses a single note must be decorated with
``requires_note_owner``; the guard runs before the method body and
passes the canonical note id through.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from modules.backend.core.exceptions import NotFoundError, UnauthorizedError
from modules.backend.core.security import TokenVerifier
from modules.backend.repositories.base import parse_identifier
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.owner import OwnerRepository
from modules.backend.services.base import BaseService

NOTE_NOT_FOUND = "The requested note was not found"


class OwnedCandidate(Protocol):
    owner_id: str


class NoteAuthorizer(BaseService):
    """Resolves the acting owner from a token and checks note ownership."""

    def __init__(
        self,
        notes: NoteRepository,
        owners: OwnerRepository,
        token_verifier: TokenVerifier,
    ) -> None:
        super().__init__()
        self.notes = notes
        self.owners = owners
        self.token_verifier = token_verifier

    async def acting_owner(self, token: str | None) -> str:
        """
        Resolve the owner identifier behind a request token.

        Raises:
            InvalidTokenError: If the token cannot be verified
            UnauthorizedError: If no owner is registered for the subject
        """
        subject = self.token_verifier.subject_of(token)
        owner_id = await self._execute_db_operation(
            "owner_id_for_subject",
            self.owners.owner_id_for_subject(subject),
        )
        if owner_id is None:
            self._logger.warning("No owner registered for subject", extra={"subject": subject})
            raise UnauthorizedError()
        return owner_id

    async def authorize_create(self, token: str | None, candidate: OwnedCandidate) -> str:
        """
        Check that a new note is being created for the caller's own account.

        Returns:
            The acting owner identifier

        Raises:
            UnauthorizedError: If the candidate's owner_id is someone else's
        """
        owner_id = await self.acting_owner(token)
        if owner_id != candidate.owner_id:
            self._logger.warning(
                "Create denied",
                extra={"owner_id": owner_id, "candidate_owner_id": candidate.owner_id},
            )
            raise UnauthorizedError()
        return owner_id

    async def authorize_on_existing(self, token: str | None, note_id: str) -> None:
        """
        Check that the caller owns an existing note.

        Raises:
            MalformedIdentifierError: If note_id is not a legal identifier
            NotFoundError: If no note has that identifier
            UnauthorizedError: If the note belongs to another owner
        """
        owner_id = await self.acting_owner(token)
        note_id = parse_identifier(note_id)

        note = await self._execute_db_operation(
            "authorize_on_existing",
            self.notes.get_by_id(note_id),
        )
        if note is None:
            raise NotFoundError(NOTE_NOT_FOUND)
        if note.owner_id != owner_id:
            self._logger.warning(
                "Access denied",
                extra={"owner_id": owner_id, "note_id": note_id},
            )
            raise UnauthorizedError()


def requires_note_owner(
    method: Callable[..., Awaitable[Any]],
) -> Callable[..., Awaitable[Any]]:
    """
    Guard a single-note service method with an ownership check.

    The decorated method must have the signature
    ``(self, token, note_id, *args, **kwargs)`` and its instance must expose
    an ``authorizer`` attribute.
    """

    @functools.wraps(method)
    async def wrapper(self: Any, token: str | None, note_id: str, *args: Any, **kwargs: Any) -> Any:
        await self.authorizer.authorize_on_existing(token, note_id)
        return await method(self, token, parse_identifier(note_id), *args, **kwargs)

    return wrapper
