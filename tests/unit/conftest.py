"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest


def make_note_row(
    note_id: str = "note-1",
    title: str = "Title",
    content: str = "Content",
    tags: str = "[]",
    created_at: datetime | None = None,
    updated_at: datetime | None = None,
) -> MagicMock:
    """Build a stand-in for a stored Note row (tags still encoded)."""
    row = MagicMock()
    row.id = note_id
    row.title = title
    row.content = content
    row.tags = tags
    row.created_at = created_at or datetime(2024, 1, 1, 12, 0, 0)
    row.updated_at = updated_at or datetime(2024, 1, 1, 12, 0, 0)
    return row


@pytest.fixture
def note_row() -> type:
    """Provide the make_note_row factory."""
    return make_note_row
