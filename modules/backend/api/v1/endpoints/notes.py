"""
Notes API Endpoints.

REST API endpoints for note management. Handlers only translate HTTP to
NoteService calls; token checks, ownership checks and validation all
live in the service.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import Authorization, NoteServiceDep, RequestId
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.note import NoteCreate, NoteEdit, NoteIdResponse, NoteResponse

router = APIRouter()


def _id_response(note_id: str, request_id: str) -> ApiResponse[NoteIdResponse]:
    return ApiResponse(
        data=NoteIdResponse(id=note_id),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List an owner's notes",
    description="Notes for one owner, oldest first. owner_id is required.",
)
async def get_owner_notes(
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
    owner_id: str | None = Query(default=None, description="Owner scope"),
    posted: bool | None = Query(default=None, description="True for live notes, false for trash"),
) -> ApiResponse[list[NoteResponse]]:
    """List notes for an owner."""
    notes = await service.get_owner_notes(authorization, owner_id, posted)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/all",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List all notes",
    description="Every note in the store, unordered.",
)
async def get_notes(
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List all notes."""
    notes = await service.get_notes(authorization)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note owned by the caller.",
)
async def get_note(
    note_id: str,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = await service.get_note(authorization, note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteIdResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note for the caller. owner_id must be the caller's own.",
)
async def create_note(
    data: NoteCreate,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Create a new note."""
    note_id = await service.create_note(authorization, data)
    return _id_response(note_id, request_id)


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteIdResponse],
    summary="Edit a note",
    description="Replace the body of a note and refresh its timestamp.",
)
async def edit_note(
    note_id: str,
    data: NoteEdit,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Edit a note."""
    note_id = await service.edit_note(authorization, note_id, data.body)
    return _id_response(note_id, request_id)


@router.post(
    "/{note_id}/pin",
    response_model=ApiResponse[NoteIdResponse],
    summary="Pin a note",
)
async def pin_note(
    note_id: str,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Pin a note."""
    note_id = await service.pin_note(authorization, note_id)
    return _id_response(note_id, request_id)


@router.post(
    "/{note_id}/unpin",
    response_model=ApiResponse[NoteIdResponse],
    summary="Unpin a note",
)
async def unpin_note(
    note_id: str,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Unpin a note."""
    note_id = await service.unpin_note(authorization, note_id)
    return _id_response(note_id, request_id)


@router.post(
    "/{note_id}/trash",
    response_model=ApiResponse[NoteIdResponse],
    summary="Move a note to the trash",
    description="Soft delete: the note is hidden and unpinned but can be restored.",
)
async def trash_note(
    note_id: str,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Trash a note."""
    note_id = await service.trash_note(authorization, note_id)
    return _id_response(note_id, request_id)


@router.post(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteIdResponse],
    summary="Restore a note from the trash",
)
async def restore_note(
    note_id: str,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Restore a note."""
    note_id = await service.restore_note(authorization, note_id)
    return _id_response(note_id, request_id)


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[NoteIdResponse],
    summary="Permanently delete a note",
    description="Removes the note for good. Cannot be undone.",
)
async def purge_note(
    note_id: str,
    service: NoteServiceDep,
    authorization: Authorization,
    request_id: RequestId,
) -> ApiResponse[NoteIdResponse]:
    """Purge a note."""
    note_id = await service.purge_note(authorization, note_id)
    return _id_response(note_id, request_id)
