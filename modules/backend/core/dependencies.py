"""
FastAPI Dependencies.

Shared dependencies for request handling. Collaborators are assembled
here and handed to services through their constructors.
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.database import get_db_session
from modules.backend.core.security import TokenVerifier
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.owner import OwnerRepository
from modules.backend.services.note import NoteService

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(request: Request, x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID.

    Prefers the id RequestContextMiddleware stored on request.state so that
    response metadata and the X-Request-ID header agree.
    """
    import uuid

    return getattr(request.state, "request_id", None) or x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_authorization(authorization: str | None = Header(None)) -> str | None:
    """
    Raw Authorization header value.

    Verification happens inside the services so that no route can skip it.
    """
    return authorization


Authorization = Annotated[str | None, Depends(get_authorization)]


def get_token_verifier() -> TokenVerifier:
    """Token verifier configured from security.yaml."""
    return TokenVerifier(get_app_config().security.jwt.subject_claim)


async def get_note_service(
    db: DbSession,
    token_verifier: TokenVerifier = Depends(get_token_verifier),
) -> NoteService:
    """Build a NoteService bound to the request's database session."""
    return NoteService(
        notes=NoteRepository(db),
        owners=OwnerRepository(db),
        token_verifier=token_verifier,
        notes_config=get_app_config().application.notes,
    )


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
