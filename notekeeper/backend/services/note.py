"""
Note Service.

Business logic layer for notes. Orchestrates the repository, encodes
tags before writing and decodes them after reading, and implements
the listing rules (search, tag filter, pagination).
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.pagination import page_count, paginate
from notekeeper.backend.core.utils import utc_now
from notekeeper.backend.models.note import Note
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.repositories.tag_codec import decode_tags, encode_tags
from notekeeper.backend.schemas.note import (
    DeleteResult,
    NoteCreate,
    NotePage,
    NoteQuery,
    NoteResponse,
    NoteUpdate,
    PageInfo,
)
from notekeeper.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    Every public method returns decoded notes (NoteResponse), never
    ORM rows, so the encoded tag column does not leak past this layer.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    @staticmethod
    def _to_response(note: Note) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            title=note.title,
            content=note.content,
            tags=decode_tags(note.tags, note_id=note.id),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    async def create_note(self, data: NoteCreate) -> NoteResponse:
        """
        Create a new note.

        Args:
            data: Validated note creation data

        Returns:
            Created note with storage-assigned id and timestamps
        """
        self._log_operation("Creating note", title=data.title, tag_count=len(data.tags))

        now = utc_now()
        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title,
                content=data.content,
                tags=encode_tags(data.tags),
                created_at=now,
                updated_at=now,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return self._to_response(note)

    async def get_note(self, note_id: str) -> NoteResponse:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        note = await self._execute_db_operation(
            "get_note",
            self.repo.get_by_id(note_id),
        )
        return self._to_response(note)

    async def list_notes(self, query: NoteQuery) -> NotePage:
        """
        List notes with optional search, tag filter and pagination.

        All rows are loaded (most recently updated first) and filtered in
        memory: `search` is a case-insensitive substring match on title or
        content, `tags` keeps notes sharing at least one tag with the filter.
        `total` counts the filtered rows before the page is cut.

        Args:
            query: Validated filter and page parameters

        Returns:
            One page of notes plus pagination info
        """
        self._log_debug(
            "Listing notes",
            search=query.search,
            tags=query.tags,
            page=query.page,
            limit=query.limit,
        )

        notes = await self._execute_db_operation("list_notes", self.repo.find_all())

        if query.search:
            needle = query.search.casefold()
            notes = [
                note for note in notes
                if needle in note.title.casefold() or needle in note.content.casefold()
            ]

        if query.tags:
            wanted = set(query.tags)
            notes = [
                note for note in notes
                if wanted.intersection(decode_tags(note.tags, note_id=note.id))
            ]

        total = len(notes)
        page = paginate(notes, query.page, query.limit)

        return NotePage(
            notes=[self._to_response(note) for note in page],
            pagination=PageInfo(
                page=query.page,
                limit=query.limit,
                total=total,
                pages=page_count(total, query.limit),
            ),
        )

    async def update_note(self, note_id: str, data: NoteUpdate) -> NoteResponse:
        """
        Update an existing note.

        Only fields present in `data` are written. updated_at is refreshed
        on every successful update, including one that supplies no fields.

        Raises:
            NotFoundError: If note not found
        """
        update_data = data.model_dump(exclude_unset=True)
        if "tags" in update_data:
            update_data["tags"] = encode_tags(update_data["tags"])

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(update_data.keys()),
        )

        note = await self._execute_db_operation(
            "update_note",
            self.repo.update(note_id, **update_data, updated_at=utc_now()),
        )

        return self._to_response(note)

    async def delete_note(self, note_id: str) -> DeleteResult:
        """
        Permanently delete a note.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation(
            "delete_note",
            self.repo.delete(note_id),
        )

        return DeleteResult()

    async def list_tags(self) -> list[str]:
        """
        Get every distinct tag in use, sorted ascending.

        Returns:
            Deduplicated, lexicographically sorted tags
        """
        encoded = await self._execute_db_operation(
            "list_tags",
            self.repo.find_all_tags(),
        )

        tags: set[str] = set()
        for raw in encoded:
            tags.update(decode_tags(raw))
        return sorted(tags)

    async def count_notes(self) -> int:
        """Total number of stored notes."""
        return await self._execute_db_operation("count_notes", self.repo.count())
