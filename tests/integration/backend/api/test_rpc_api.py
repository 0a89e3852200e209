"""
Integration Tests for the Batched Procedure Transport.

Tests the `notes.*` procedures over HTTP with a real database.
"""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from httpx import AsyncClient


def _batch_input(*inputs) -> dict[str, str]:
    """Query parameters for a batched GET."""
    return {
        "batch": "1",
        "input": json.dumps({str(index): value for index, value in enumerate(inputs)}),
    }


class TestSingleCalls:
    """Tests for unbatched calls."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client: AsyncClient, rpc):
        response = await client.post(
            "/trpc/notes.create",
            json={"title": "Shopping List", "content": "Milk", "tags": ["shopping"]},
        )

        assert response.status_code == 200
        created = rpc.data(response.json())
        assert created["tags"] == ["shopping"]
        assert set(created) == {"id", "title", "content", "tags", "createdAt", "updatedAt"}
        assert created["createdAt"] == created["updatedAt"]
        assert created["createdAt"].endswith("Z")

        response = await client.get(
            "/trpc/notes.getById",
            params={"input": json.dumps({"id": created["id"]})},
        )

        assert response.status_code == 200
        assert rpc.data(response.json()) == created

    @pytest.mark.asyncio
    async def test_get_tags_without_input(self, client: AsyncClient, rpc, insert_note):
        await insert_note("One", tags=["b", "a"])

        response = await client.get("/trpc/notes.getTags")

        assert rpc.data(response.json()) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_get_all_defaults(self, client: AsyncClient, rpc):
        response = await client.get("/trpc/notes.getAll")

        page = rpc.data(response.json())
        assert page == {
            "notes": [],
            "pagination": {"page": 1, "limit": 20, "total": 0, "pages": 0},
        }

    @pytest.mark.asyncio
    async def test_update(self, client: AsyncClient, rpc, insert_note):
        note = await insert_note("Title", content="Old", tags=["x"], updated_at=datetime(2020, 1, 1))

        response = await client.post(
            "/trpc/notes.update",
            json={"id": note.id, "data": {"title": "New"}},
        )

        updated = rpc.data(response.json())
        assert updated["title"] == "New"
        assert updated["content"] == "Old"
        assert updated["tags"] == ["x"]
        assert updated["updatedAt"] > "2020-01-01T00:00:00"

    @pytest.mark.asyncio
    async def test_delete_twice(self, client: AsyncClient, rpc, insert_note):
        note = await insert_note("Doomed")

        response = await client.post("/trpc/notes.delete", json={"id": note.id})
        assert rpc.data(response.json()) == {"success": True, "message": "Note deleted successfully"}

        response = await client.post("/trpc/notes.delete", json={"id": note.id})
        assert response.status_code == 404
        error = rpc.error(response.json(), "NOT_FOUND")
        assert error["message"] == "Note not found"
        assert error["code"] == -32004


class TestErrors:
    """Tests for error items."""

    @pytest.mark.asyncio
    async def test_invalid_input(self, client: AsyncClient, rpc):
        response = await client.post("/trpc/notes.create", json={"title": "", "content": "C"})

        assert response.status_code == 400
        error = rpc.error(response.json(), "BAD_REQUEST")
        assert error["data"]["path"] == "notes.create"
        assert error["data"]["details"]["validation_errors"][0]["field"] == "title"

    @pytest.mark.asyncio
    async def test_page_values_are_not_coerced(self, client: AsyncClient, rpc):
        response = await client.get(
            "/trpc/notes.getAll",
            params={"input": json.dumps({"page": True, "limit": "3"})},
        )

        assert response.status_code == 400
        error = rpc.error(response.json(), "BAD_REQUEST")
        fields = {e["field"] for e in error["data"]["details"]["validation_errors"]}
        assert fields == {"page", "limit"}

    @pytest.mark.asyncio
    async def test_invalid_input_is_not_stored(self, client: AsyncClient, rpc):
        await client.post("/trpc/notes.create", json={"title": "T", "content": ""})

        response = await client.get("/trpc/notes.getAll")

        assert rpc.data(response.json())["pagination"]["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_procedure(self, client: AsyncClient, rpc):
        response = await client.get("/trpc/notes.archive")

        assert response.status_code == 404
        rpc.error(response.json(), "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_mutation_via_get(self, client: AsyncClient, rpc):
        response = await client.get(
            "/trpc/notes.create",
            params={"input": json.dumps({"title": "T", "content": "C"})},
        )

        assert response.status_code == 405
        rpc.error(response.json(), "METHOD_NOT_SUPPORTED")

    @pytest.mark.asyncio
    async def test_query_via_post(self, client: AsyncClient, rpc):
        response = await client.post("/trpc/notes.getTags")

        assert response.status_code == 405
        rpc.error(response.json(), "METHOD_NOT_SUPPORTED")

    @pytest.mark.asyncio
    async def test_undecodable_input(self, client: AsyncClient, rpc):
        response = await client.get("/trpc/notes.getById", params={"input": "{not json"})

        assert response.status_code == 400
        error = rpc.error(response.json(), "PARSE_ERROR")
        assert error["code"] == -32700

    @pytest.mark.asyncio
    async def test_multiple_paths_without_batch(self, client: AsyncClient, rpc):
        response = await client.get("/trpc/notes.getAll,notes.getTags")

        assert response.status_code == 400
        rpc.error(response.json(), "BAD_REQUEST")


class TestBatching:
    """Tests for batched calls."""

    @pytest.mark.asyncio
    async def test_batched_queries_in_order(self, client: AsyncClient, rpc, insert_note):
        await insert_note("Milk run", tags=["shopping"])
        await insert_note("Meeting", tags=["work"])

        response = await client.get(
            "/trpc/notes.getAll,notes.getTags",
            params=_batch_input({"search": "milk"}),
        )

        assert response.status_code == 200
        items = response.json()
        assert isinstance(items, list)
        page = rpc.data(items[0])
        assert [note["title"] for note in page["notes"]] == ["Milk run"]
        assert rpc.data(items[1]) == ["shopping", "work"]

    @pytest.mark.asyncio
    async def test_mixed_outcomes_are_multi_status(self, client: AsyncClient, rpc, insert_note):
        note = await insert_note("Exists")

        response = await client.get(
            "/trpc/notes.getById,notes.getById",
            params=_batch_input({"id": note.id}, {"id": "missing"}),
        )

        assert response.status_code == 207
        first, second = response.json()
        assert rpc.data(first)["title"] == "Exists"
        rpc.error(second, "NOT_FOUND")

    @pytest.mark.asyncio
    async def test_failing_call_does_not_undo_others(self, client: AsyncClient, rpc):
        response = await client.post(
            "/trpc/notes.create,notes.create",
            params={"batch": "1"},
            json={
                "0": {"title": "Kept", "content": "C"},
                "1": {"title": "", "content": "C"},
            },
        )

        assert response.status_code == 207
        kept, rejected = response.json()
        rpc.data(kept)
        rpc.error(rejected, "BAD_REQUEST")

        response = await client.get("/trpc/notes.getAll")
        titles = [note["title"] for note in rpc.data(response.json())["notes"]]
        assert titles == ["Kept"]

    @pytest.mark.asyncio
    async def test_shared_error_status(self, client: AsyncClient, rpc):
        response = await client.get(
            "/trpc/notes.getById,notes.getById",
            params=_batch_input({"id": "a"}, {"id": "b"}),
        )

        assert response.status_code == 404
        assert len(response.json()) == 2

    @pytest.mark.asyncio
    async def test_batch_input_must_be_object(self, client: AsyncClient, rpc):
        response = await client.get(
            "/trpc/notes.getTags",
            params={"batch": "1", "input": json.dumps([1, 2])},
        )

        assert response.status_code == 400
        (item,) = response.json()
        rpc.error(item, "BAD_REQUEST")

    @pytest.mark.asyncio
    async def test_batch_size_limit(self, client: AsyncClient, rpc):
        app_config = MagicMock()
        app_config.features.rpc_batching_enabled = True
        app_config.application.rpc.max_batch_size = 2

        with patch("notekeeper.backend.api.rpc.router.get_app_config", return_value=app_config):
            response = await client.get(
                "/trpc/notes.getTags,notes.getTags,notes.getTags",
                params={"batch": "1"},
            )

        assert response.status_code == 400
        items = response.json()
        assert len(items) == 3
        for item in items:
            rpc.error(item, "BAD_REQUEST")

    @pytest.mark.asyncio
    async def test_batching_disabled(self, client: AsyncClient, rpc):
        app_config = MagicMock()
        app_config.features.rpc_batching_enabled = False

        with patch("notekeeper.backend.api.rpc.router.get_app_config", return_value=app_config):
            response = await client.get("/trpc/notes.getTags", params={"batch": "1"})

        assert response.status_code == 400
        assert response.json()[0]["error"]["message"] == "Batching is disabled"
