"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Each class carries a stable error code; the HTTP status is resolved in
exception_handlers.py.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class BadRequestError(ApplicationError):
    """Raised when a request cannot be processed as sent."""

    def __init__(self, message: str = "Bad request", code: str = "REQ_BAD_REQUEST") -> None:
        super().__init__(message, code=code)


class InvalidTokenError(BadRequestError):
    """Raised when the Authorization header is missing or its token is invalid."""

    def __init__(
        self,
        message: str = "Invalid header token. The request is not authorized.",
    ) -> None:
        super().__init__(message, code="AUTH_INVALID_TOKEN")


class ValidationError(BadRequestError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class MalformedIdentifierError(BadRequestError):
    """Raised when an identifier is not a legal store identifier."""

    def __init__(
        self,
        message: str = "The requested note id wasn't a legal object id.",
    ) -> None:
        super().__init__(message, code="VAL_MALFORMED_ID")


class UnauthorizedError(ApplicationError):
    """Raised when the caller is authenticated but may not act on the resource."""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
    ) -> None:
        super().__init__(message, code="AUTHZ_UNAUTHORIZED")


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
