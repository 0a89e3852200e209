"""
Integration Tests for Database Seeding.

Tests that the sample notes are loaded through the service.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.schemas.note import NoteQuery
from notekeeper.backend.seed import SAMPLE_NOTES, seed_database
from notekeeper.backend.services.note import NoteService


class TestSeedDatabase:
    """Tests for seed_database."""

    @pytest.mark.asyncio
    async def test_creates_sample_notes(self, db_session: AsyncSession):
        created = await seed_database(db_session)

        assert [note.title for note in created] == [note["title"] for note in SAMPLE_NOTES]
        assert created[1].tags == ["shopping", "personal"]

    @pytest.mark.asyncio
    async def test_clears_existing_notes(self, db_session: AsyncSession, insert_note):
        await insert_note("Leftover")

        await seed_database(db_session)
        page = await NoteService(db_session).list_notes(NoteQuery())

        assert page.pagination.total == len(SAMPLE_NOTES)
        assert "Leftover" not in {note.title for note in page.notes}

    @pytest.mark.asyncio
    async def test_keep_existing_notes(self, db_session: AsyncSession, insert_note):
        await insert_note("Leftover")

        await seed_database(db_session, clear=False)
        page = await NoteService(db_session).list_notes(NoteQuery())

        assert page.pagination.total == len(SAMPLE_NOTES) + 1
        assert await NoteService(db_session).count_notes() == len(SAMPLE_NOTES) + 1

    @pytest.mark.asyncio
    async def test_sample_tags_are_listed(self, db_session: AsyncSession):
        await seed_database(db_session)

        tags = await NoteService(db_session).list_tags()

        assert tags == sorted(tags)
        assert {"welcome", "work", "books"} <= set(tags)
