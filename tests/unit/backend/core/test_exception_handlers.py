"""
Unit Tests for Exception Handlers.

Handlers are called directly with a mocked Request; responses are decoded
back into the ErrorResponse envelope shape.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from modules.backend.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    register_exception_handlers,
    status_for,
    unhandled_exception_handler,
    validation_error_handler,
)
from modules.backend.core.exceptions import (
    ApplicationError,
    BadRequestError,
    DatabaseError,
    InvalidTokenError,
    MalformedIdentifierError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


def make_request(path="/api/v1/notes/abc", method="POST", header_id=None, state_id=None):
    request = MagicMock(spec=Request)
    request.url.path = path
    request.method = method
    request.headers = {"x-request-id": header_id} if header_id else {}
    if state_id is None:
        del request.state.request_id
    else:
        request.state.request_id = state_id
    return request


def envelope(response) -> dict:
    return json.loads(response.body)


class TestStatusFor:
    def test_map_covers_each_family(self):
        assert EXCEPTION_STATUS_MAP == {
            BadRequestError: 400,
            UnauthorizedError: 401,
            NotFoundError: 404,
            DatabaseError: 503,
        }

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (InvalidTokenError(), 400),
            (ValidationError(), 400),
            (MalformedIdentifierError(), 400),
            (UnauthorizedError(), 401),
            (NotFoundError(), 404),
            (DatabaseError(), 503),
            (ApplicationError("boom"), 500),
        ],
    )
    def test_resolves_through_mro(self, exc, status):
        assert status_for(exc) == status

    def test_user_defined_subclass_inherits_status(self):
        class NoteGoneError(NotFoundError):
            pass

        assert status_for(NoteGoneError()) == 404


class TestGetRequestId:
    def test_state_wins_over_header(self):
        assert _get_request_id(make_request(header_id="from-header", state_id="from-state")) == "from-state"

    def test_header_fallback(self):
        assert _get_request_id(make_request(header_id="from-header")) == "from-header"

    def test_none_when_absent(self):
        assert _get_request_id(make_request()) is None


class TestApplicationErrorHandler:
    @pytest.mark.asyncio
    async def test_not_found_envelope(self):
        response = await application_error_handler(
            make_request(state_id="req-9"), NotFoundError("The requested note was not found")
        )

        body = envelope(response)
        assert response.status_code == 404
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"] == {
            "code": "RES_NOT_FOUND",
            "message": "The requested note was not found",
            "details": None,
        }
        assert body["metadata"]["request_id"] == "req-9"

    @pytest.mark.asyncio
    async def test_invalid_token_is_bad_request(self):
        response = await application_error_handler(make_request(), InvalidTokenError())

        body = envelope(response)
        assert response.status_code == 400
        assert body["error"]["code"] == "AUTH_INVALID_TOKEN"
        assert body["error"]["message"] == "Invalid header token. The request is not authorized."

    @pytest.mark.asyncio
    async def test_not_owner_is_401(self):
        response = await application_error_handler(make_request(), UnauthorizedError())

        assert response.status_code == 401
        assert envelope(response)["error"]["code"] == "AUTHZ_UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_validation_details_are_rendered(self):
        exc = ValidationError(details={"body": "Maximum length is 300"})

        response = await application_error_handler(make_request(), exc)

        assert response.status_code == 400
        assert envelope(response)["error"]["details"] == {"body": "Maximum length is 300"}

    @pytest.mark.asyncio
    async def test_store_fault_is_503(self):
        response = await application_error_handler(make_request(), DatabaseError())

        assert response.status_code == 503
        assert envelope(response)["error"]["code"] == "SYS_DATABASE_ERROR"

    @pytest.mark.asyncio
    async def test_unmapped_application_error_is_500(self):
        response = await application_error_handler(
            make_request(), ApplicationError("odd", code="CUSTOM_ERROR")
        )

        assert response.status_code == 500
        assert envelope(response)["error"]["code"] == "CUSTOM_ERROR"


class TestValidationErrorHandler:
    @pytest.mark.asyncio
    async def test_lists_each_bad_field(self):
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [
            {"loc": ("body", "owner_id"), "msg": "Field required", "type": "missing"},
            {"loc": ("query", "posted"), "msg": "Input should be a valid boolean", "type": "bool_parsing"},
        ]

        response = await validation_error_handler(make_request(header_id="shape-1"), exc)

        body = envelope(response)
        assert response.status_code == 422
        assert body["error"]["code"] == "VAL_REQUEST_INVALID"
        assert [e["field"] for e in body["error"]["details"]["validation_errors"]] == [
            "body.owner_id",
            "query.posted",
        ]
        assert body["metadata"]["request_id"] == "shape-1"

    @pytest.mark.asyncio
    async def test_missing_keys_get_defaults(self):
        exc = MagicMock(spec=RequestValidationError)
        exc.errors.return_value = [{}]

        response = await validation_error_handler(make_request(), exc)

        assert envelope(response)["error"]["details"]["validation_errors"] == [
            {"field": "", "message": "Validation error", "type": "unknown"}
        ]


class TestUnhandledExceptionHandler:
    @pytest.mark.asyncio
    async def test_generic_500_without_internals(self):
        exc = RuntimeError("connect failed: postgresql://notes:hunter2@db/notes")

        response = await unhandled_exception_handler(make_request(), exc)

        assert response.status_code == 500
        assert envelope(response)["error"] == {
            "code": "SYS_INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "details": None,
        }
        assert b"hunter2" not in response.body


class TestRegisterExceptionHandlers:
    def test_registers_all_three(self):
        app = FastAPI()

        register_exception_handlers(app)

        assert app.exception_handlers[ApplicationError] is application_error_handler
        assert app.exception_handlers[RequestValidationError] is validation_error_handler
        assert app.exception_handlers[Exception] is unhandled_exception_handler
