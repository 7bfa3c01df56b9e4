"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.backend.core.exceptions import InvalidTokenError
from modules.backend.core.security import TokenVerifier
from modules.backend.core.utils import utc_now
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.owner import OwnerRepository

OWNER_ID = "owner-1"
OTHER_OWNER_ID = "owner-2"
SUBJECT = "auth0|owner-1"
TOKEN = "Bearer valid-token"
NOTE_ID = "6f1c2a6e-3b0d-4c8e-9f5e-2a7b1d9c4e10"


def make_note(**overrides) -> SimpleNamespace:
    """Build a note-shaped record for mocked store results."""
    fields = {
        "id": NOTE_ID,
        "owner_id": OWNER_ID,
        "body": "hello",
        "timestamp": utc_now(),
        "posted": True,
        "pinned": False,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


# =============================================================================
# Collaborator Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_notes() -> MagicMock:
    """
    Mock note store.

    get_by_id returns a note owned by OWNER_ID; updates and deletes
    report an existing previous record.
    """
    notes = MagicMock(spec=NoteRepository)
    notes.get_by_id = AsyncMock(return_value=make_note())
    notes.find = AsyncMock(return_value=[])
    notes.find_one = AsyncMock(return_value=make_note())
    notes.insert = AsyncMock(return_value=NOTE_ID)
    notes.find_one_and_update = AsyncMock(return_value=vars(make_note()))
    notes.find_one_and_delete = AsyncMock(return_value=vars(make_note()))
    return notes


@pytest.fixture
def mock_owners() -> MagicMock:
    """Mock owner directory resolving SUBJECT to OWNER_ID."""
    owners = MagicMock(spec=OwnerRepository)
    owners.owner_id_for_subject = AsyncMock(
        side_effect=lambda subject: OWNER_ID if subject == SUBJECT else None
    )
    return owners


@pytest.fixture
def mock_verifier() -> MagicMock:
    """Mock token verifier accepting only TOKEN."""

    def _subject_of(token):
        if token != TOKEN:
            raise InvalidTokenError()
        return SUBJECT

    verifier = MagicMock(spec=TokenVerifier)
    verifier.subject_of = MagicMock(side_effect=_subject_of)
    verifier.verify = MagicMock(side_effect=lambda token: token == TOKEN)
    return verifier


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.get_logger", return_value=mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
