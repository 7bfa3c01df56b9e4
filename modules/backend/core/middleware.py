"""
Request Context Middleware.

Gives every request an id, times it, and binds request_id, method and
path into structlog contextvars so that service-level log lines about a
note carry the request they belong to.
"""

import re
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.logging import get_logger
from modules.backend.core.utils import elapsed_ms, monotonic_start

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

# Client-supplied ids are echoed into headers and logs
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def resolve_request_id(request: Request) -> str:
    """Reuse a well-formed inbound X-Request-ID, otherwise mint a UUID4."""
    inbound = request.headers.get(REQUEST_ID_HEADER)
    if inbound and _REQUEST_ID_PATTERN.fullmatch(inbound):
        return inbound
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Per-request id, timing and log context.

    request.state.request_id is what the exception handlers and the
    ApiResponse metadata report; the same value is returned in the
    X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        start = monotonic_start()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "Request raised",
                    extra={"duration_ms": elapsed_ms(start), "error_type": type(exc).__name__},
                )
                raise

            duration_ms = elapsed_ms(start)
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms}ms"
            logger.debug(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "client_host": request.client.host if request.client else None,
                },
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
