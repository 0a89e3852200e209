"""
Integration Test Fixtures.

Fixtures for integration tests - uses real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Callable, Awaitable
from datetime import datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.backend.core.database import get_db_session, get_session_factory, session_scope
from notekeeper.backend.models.note import Note
from notekeeper.backend.repositories.tag_codec import encode_tags


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the test database.

    Both transports use the test engine: REST endpoints get a committed
    session per request, procedure calls get the test session factory
    and open one session per call.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_scope(db_session_factory) as session:
            yield session

    from notekeeper.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_session_factory] = lambda: db_session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def insert_note(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Note]]:
    """
    Insert a note row directly, with explicit timestamps when given.

    Usage:
        note = await insert_note("Old", updated_at=datetime(2020, 1, 1))
    """
    async def _insert(
        title: str,
        content: str = "content",
        tags: list[str] | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> Note:
        note = Note(title=title, content=content, tags=encode_tags(tags or []))
        if created_at is not None:
            note.created_at = created_at
        if updated_at is not None:
            note.updated_at = updated_at
        async with session_scope(db_session_factory) as session:
            session.add(note)
        return note

    return _insert


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
            expected_code: Expected error code (optional)

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a request validation error (422).

        Args:
            response: httpx Response object
            field: Expected field with validation error (optional)

        Returns:
            Response JSON data
        """
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


class RpcAssertions:
    """Helper class for procedure call response assertions."""

    @staticmethod
    def data(item: dict[str, Any]) -> Any:
        """Return the data of a result item."""
        assert "result" in item, f"Expected result item, got: {item}"
        return item["result"]["data"]

    @staticmethod
    def error(item: dict[str, Any], expected_code: str) -> dict[str, Any]:
        """Assert an error item carries the expected error name."""
        assert "error" in item, f"Expected error item, got: {item}"
        actual_code = item["error"]["data"]["code"]
        assert actual_code == expected_code, (
            f"Expected error code {expected_code}, got {actual_code}"
        )
        return item["error"]


@pytest.fixture
def rpc() -> RpcAssertions:
    """Provide procedure call assertion helpers."""
    return RpcAssertions()
