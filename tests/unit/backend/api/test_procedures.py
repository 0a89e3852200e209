"""
Unit Tests for the Notes Procedure Set.

Tests the procedure registry and that each handler calls the matching
service method.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notekeeper.backend.api.rpc.procedures import PROCEDURES, get_procedure
from notekeeper.backend.schemas.note import (
    DeleteResult,
    NoteCreate,
    NoteIdInput,
    NoteQuery,
    NoteUpdate,
    NoteUpdateInput,
)


class TestRegistry:
    """Tests for the procedure registry."""

    def test_registered_paths(self):
        assert set(PROCEDURES) == {
            "notes.create",
            "notes.getById",
            "notes.getAll",
            "notes.update",
            "notes.delete",
            "notes.getTags",
        }

    @pytest.mark.parametrize(
        ("path", "kind"),
        [
            ("notes.create", "mutation"),
            ("notes.getById", "query"),
            ("notes.getAll", "query"),
            ("notes.update", "mutation"),
            ("notes.delete", "mutation"),
            ("notes.getTags", "query"),
        ],
    )
    def test_procedure_kinds(self, path, kind):
        assert get_procedure(path).kind == kind

    def test_input_schemas(self):
        assert get_procedure("notes.create").input_schema is NoteCreate
        assert get_procedure("notes.getById").input_schema is NoteIdInput
        assert get_procedure("notes.getAll").input_schema is NoteQuery
        assert get_procedure("notes.update").input_schema is NoteUpdateInput
        assert get_procedure("notes.delete").input_schema is NoteIdInput
        assert get_procedure("notes.getTags").input_schema is None

    def test_unknown_path(self):
        assert get_procedure("notes.archive") is None
        assert get_procedure("") is None


class TestHandlers:
    """Tests for handler delegation to NoteService."""

    @pytest.fixture
    def service(self):
        return MagicMock(
            create_note=AsyncMock(return_value="created"),
            get_note=AsyncMock(return_value="note"),
            list_notes=AsyncMock(return_value="page"),
            update_note=AsyncMock(return_value="updated"),
            delete_note=AsyncMock(return_value=DeleteResult()),
            list_tags=AsyncMock(return_value=["a", "b"]),
        )

    @pytest.mark.asyncio
    async def test_create(self, service):
        data = NoteCreate(title="T", content="C")

        result = await get_procedure("notes.create").handler(service, data)

        assert result == "created"
        service.create_note.assert_awaited_once_with(data)

    @pytest.mark.asyncio
    async def test_get_by_id(self, service):
        result = await get_procedure("notes.getById").handler(service, NoteIdInput(id="n1"))

        assert result == "note"
        service.get_note.assert_awaited_once_with("n1")

    @pytest.mark.asyncio
    async def test_get_all(self, service):
        query = NoteQuery(search="x")

        result = await get_procedure("notes.getAll").handler(service, query)

        assert result == "page"
        service.list_notes.assert_awaited_once_with(query)

    @pytest.mark.asyncio
    async def test_update(self, service):
        data = NoteUpdateInput(id="n1", data=NoteUpdate(title="New"))

        result = await get_procedure("notes.update").handler(service, data)

        assert result == "updated"
        service.update_note.assert_awaited_once_with("n1", data.data)

    @pytest.mark.asyncio
    async def test_delete(self, service):
        result = await get_procedure("notes.delete").handler(service, NoteIdInput(id="n1"))

        assert result.success is True
        service.delete_note.assert_awaited_once_with("n1")

    @pytest.mark.asyncio
    async def test_get_tags(self, service):
        result = await get_procedure("notes.getTags").handler(service, None)

        assert result == ["a", "b"]
        service.list_tags.assert_awaited_once_with()
