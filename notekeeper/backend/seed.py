"""
Database Seeding.

Populates the notes table with a small set of sample notes for local
development and demos.

Usage:
    python cli.py db seed
    python run.py --action seed
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.logging import get_logger, log_with_source
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.schemas.note import NoteCreate, NoteResponse
from notekeeper.backend.services.note import NoteService

logger = get_logger(__name__)

SAMPLE_NOTES: list[dict] = [
    {
        "title": "Welcome to Notes API",
        "content": (
            "This is your first note! You can create, read, update, and delete "
            "notes using the procedure API."
        ),
        "tags": ["welcome", "getting-started"],
    },
    {
        "title": "Shopping List",
        "content": "Milk, bread, eggs, cheese, and some fresh vegetables for the week.",
        "tags": ["shopping", "personal"],
    },
    {
        "title": "Meeting Notes - Project Kickoff",
        "content": (
            "Discussed project timeline, team roles, and initial requirements. "
            "Next meeting scheduled for Friday."
        ),
        "tags": ["work", "meeting", "project"],
    },
    {
        "title": "Recipe Ideas",
        "content": (
            "Pasta carbonara, chicken curry, and homemade pizza. "
            "Need to buy ingredients this weekend."
        ),
        "tags": ["cooking", "recipes", "food"],
    },
    {
        "title": "Book Recommendations",
        "content": (
            "The Pragmatic Programmer, Clean Code, and Design Patterns. "
            "Must-read for developers."
        ),
        "tags": ["books", "programming", "learning"],
    },
]


async def seed_database(session: AsyncSession, clear: bool = True) -> list[NoteResponse]:
    """
    Insert the sample notes.

    Args:
        session: Open session; the caller owns the transaction
        clear: Delete every existing note first

    Returns:
        The created notes, in insertion order
    """
    if clear:
        removed = await NoteRepository(session).delete_all()
        log_with_source(logger, "seed", "info", "Cleared existing notes", count=removed)

    service = NoteService(session)
    created = [
        await service.create_note(NoteCreate(**note_data))
        for note_data in SAMPLE_NOTES
    ]

    log_with_source(
        logger,
        "seed",
        "info",
        "Sample notes created",
        count=len(created),
        total=await service.count_notes(),
    )
    return created
