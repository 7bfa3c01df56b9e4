"""
Integration Test Fixtures.

Real repositories on the per-test SQLite database, real JWT verification,
and an httpx client against the app with get_db_session pointed at the
same session. Two registered owners, ALICE and BOB, cover the
"someone else's note" cases.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.security import TokenVerifier
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.owner import OwnerRepository
from modules.backend.services.note import NoteService

ALICE = "auth0|alice"
BOB = "auth0|bob"


@pytest.fixture
def note_repo(db_session: AsyncSession) -> NoteRepository:
    return NoteRepository(db_session)


@pytest.fixture
def note_service(db_session: AsyncSession) -> NoteService:
    return NoteService(
        notes=NoteRepository(db_session),
        owners=OwnerRepository(db_session),
        token_verifier=TokenVerifier(),
    )


@pytest.fixture
async def owners(add_owner: Callable[..., Any]) -> dict[str, str]:
    """Subject -> owner id for ALICE and BOB."""
    return {
        ALICE: await add_owner(ALICE, "Alice"),
        BOB: await add_owner(BOB, "Bob"),
    }


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient on a fresh app sharing the test session.

    ASGITransport does not run the lifespan, so startup checks and
    logging setup are skipped here.
    """
    from modules.backend.main import create_app

    async def shared_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = shared_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(make_token: Callable[[str], str]) -> Callable[[str], dict[str, str]]:
    """auth_headers(ALICE) -> {"Authorization": "Bearer <jwt for alice>"}"""
    return lambda subject: {"Authorization": make_token(subject)}


class ApiAssertions:
    """Checks on the ApiResponse / ErrorResponse envelopes; each returns the decoded body."""

    @staticmethod
    def _status(response: Response, expected: int) -> dict[str, Any]:
        assert response.status_code == expected, (
            f"expected {expected}, got {response.status_code}: {response.text}"
        )
        return response.json()

    def assert_success(self, response: Response, expected_status: int = 200) -> dict[str, Any]:
        body = self._status(response, expected_status)
        assert body["success"] is True, body
        assert body["error"] is None
        return body

    def assert_error(
        self,
        response: Response,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        body = self._status(response, expected_status)
        assert body["success"] is False, body
        assert body["data"] is None
        if expected_code is not None:
            assert body["error"]["code"] == expected_code, body["error"]
        return body

    def assert_validation_error(self, response: Response, field: str | None = None) -> dict[str, Any]:
        """422 request-shape error, optionally naming a field such as ``owner_id``."""
        body = self.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field is not None:
            fields = [e["field"] for e in body["error"]["details"]["validation_errors"]]
            assert any(f.split(".")[-1] == field for f in fields), fields
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
