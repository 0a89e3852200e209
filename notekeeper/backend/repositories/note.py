"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model. Tags are stored and returned in their encoded
form; encoding and decoding belong to the caller (see tag_codec).
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.models.note import Note
from notekeeper.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def find_all(self) -> list[Note]:
        """
        Get every note, most recently updated first.

        Ties on updated_at keep the store's natural row order.

        Returns:
            List of all notes
        """
        result = await self.session.execute(
            select(Note).order_by(Note.updated_at.desc())
        )
        return list(result.scalars().all())

    async def find_all_tags(self) -> list[str]:
        """
        Get the encoded tag column of every note.

        Returns:
            One encoded tag string per note
        """
        result = await self.session.execute(select(Note.tags))
        return list(result.scalars().all())

    async def delete_all(self) -> int:
        """
        Delete every note.

        Returns:
            Number of deleted notes
        """
        result = await self.session.execute(delete(Note))
        await self.session.flush()
        return result.rowcount
