"""
Base Service.

Shared plumbing for NoteService and NoteAuthorizer: a logger named after
the concrete service module, store-fault wrapping, and operation logging
that tags each line with the service class.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from modules.backend.core.exceptions import DatabaseError
from modules.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """Collaborators are injected by subclasses; this class holds no state of its own."""

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a store call, turning SQLAlchemy failures into DatabaseError.

        Application errors raised inside the call pass through untouched.
        """
        try:
            return await coro
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error_type": type(e).__name__, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra={"service": type(self).__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": type(self).__name__, **context})
