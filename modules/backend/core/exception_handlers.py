"""
Exception Handlers.

Turns every failure leaving a route into the ErrorResponse envelope:

    ApplicationError         -> status from EXCEPTION_STATUS_MAP (MRO walk)
    RequestValidationError   -> 422 VAL_REQUEST_INVALID
    anything else            -> 500 SYS_INTERNAL_ERROR, details withheld

Register once on the app with register_exception_handlers(app).
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from modules.backend.core.exceptions import (
    ApplicationError,
    BadRequestError,
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from modules.backend.core.logging import get_logger
from modules.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Subclasses resolve to their nearest mapped ancestor
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    BadRequestError: 400,
    UnauthorizedError: 401,
    NotFoundError: 404,
    DatabaseError: 503,
}


def status_for(exc: ApplicationError) -> int:
    """Resolve the HTTP status for an application exception."""
    return next(
        (EXCEPTION_STATUS_MAP[cls] for cls in type(exc).__mro__ if cls in EXCEPTION_STATUS_MAP),
        500,
    )


def _get_request_id(request: Request) -> str | None:
    """Request id set by RequestContextMiddleware, else the inbound header."""
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


def _error_response(
    status_code: int,
    code: str,
    message: str,
    request_id: str | None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    envelope = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """
    Handle ApplicationError and its subclasses.

    Client errors are logged at WARNING, server-side ones (store faults)
    at ERROR. Only ValidationError carries field-level details.
    """
    status_code = status_for(exc)
    request_id = _get_request_id(request)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request failed",
        extra={
            "code": exc.code,
            "status": status_code,
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id,
        },
    )

    details = exc.details if isinstance(exc, ValidationError) and exc.details else None
    return _error_response(status_code, exc.code, exc.message, request_id, details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request-shape errors raised by FastAPI before a route runs.

    Missing owner_id or a non-boolean posted filter land here; the note
    body rules are enforced by the service layer and answer 400 instead.
    """
    request_id = _get_request_id(request)
    problems = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in exc.errors()
    ]

    logger.warning(
        "Request shape rejected",
        extra={
            "fields": [p["field"] for p in problems],
            "path": request.url.path,
            "request_id": request_id,
        },
    )

    return _error_response(
        422,
        "VAL_REQUEST_INVALID",
        "Request validation failed",
        request_id,
        {"validation_errors": problems},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and answer a generic 500 that leaks nothing."""
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id,
        },
    )

    return _error_response(500, "SYS_INTERNAL_ERROR", "An unexpected error occurred", request_id)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the three handlers to the FastAPI app."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
