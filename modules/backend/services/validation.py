"""
Note Validation.

Validation rules for note payloads, kept separate from the request
schemas. Each check returns a ValidationResult with field-level reasons;
callers decide when to turn a failure into a ValidationError.

Usage:
    result = validate_note_body(data.body)
    result.raise_for_errors()
"""

from dataclasses import dataclass, field
from typing import Any

from modules.backend.core.exceptions import ValidationError

DEFAULT_BODY_MIN_LENGTH = 2
DEFAULT_BODY_MAX_LENGTH = 300


@dataclass
class ValidationResult:
    """Outcome of a validation step: pass/fail plus reasons keyed by field."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, reason: str) -> None:
        self.errors[field_name] = reason

    def raise_for_errors(self, message: str = "Note validation failed") -> None:
        """
        Raises:
            ValidationError: If any field failed, with the reasons as details
        """
        if self.errors:
            raise ValidationError(message, details=dict(self.errors))


def validate_note_body(
    body: Any,
    min_length: int = DEFAULT_BODY_MIN_LENGTH,
    max_length: int = DEFAULT_BODY_MAX_LENGTH,
) -> ValidationResult:
    """
    Check a note body against the length bounds (inclusive).

    Args:
        body: Candidate body text
        min_length: Minimum number of characters
        max_length: Maximum number of characters

    Returns:
        ValidationResult, invalid when the body is missing or out of bounds
    """
    result = ValidationResult()

    if not isinstance(body, str):
        result.add("body", "Body is required")
    elif len(body) < min_length:
        result.add("body", f"Minimum length is {min_length}")
    elif len(body) > max_length:
        result.add("body", f"Maximum length is {max_length}")

    return result
