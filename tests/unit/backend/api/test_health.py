"""
Unit Tests for Health Check Endpoints.

Tests the health check functionality including:
- Liveness check (/health)
- Readiness check (/health/ready)
- Detailed health check (/health/detailed)
- Database connectivity check
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError


def _session_scope_yielding(session):
    """Build a session_scope replacement that yields the given session."""
    @asynccontextmanager
    async def fake_scope(session_factory):
        yield session

    return fake_scope


class TestHealthCheck:
    """Tests for the liveness health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy(self):
        """Should return healthy status."""
        from notekeeper.backend.api.health import health_check

        result = await health_check()

        assert result == {"status": "healthy"}


class TestCheckDatabase:
    """Tests for the database health check function."""

    @pytest.mark.asyncio
    async def test_returns_healthy_on_successful_connection(self):
        """Should return healthy with latency when database is reachable."""
        from notekeeper.backend.api.health import check_database

        mock_session = AsyncMock()

        with patch("notekeeper.backend.api.health.get_session_factory", return_value=MagicMock()), \
             patch("notekeeper.backend.api.health.session_scope", _session_scope_yielding(mock_session)):
            result = await check_database()

        assert result["status"] == "healthy"
        assert "latency_ms" in result
        mock_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_returns_unhealthy_on_connection_error(self):
        """Should return unhealthy with the error when the query fails."""
        from notekeeper.backend.api.health import check_database

        mock_session = AsyncMock()
        mock_session.execute.side_effect = OperationalError(
            "SELECT 1", {}, Exception("unable to open database file")
        )

        with patch("notekeeper.backend.api.health.get_session_factory", return_value=MagicMock()), \
             patch("notekeeper.backend.api.health.session_scope", _session_scope_yielding(mock_session)):
            result = await check_database()

        assert result["status"] == "unhealthy"
        assert "unable to open database file" in result["error"]


class TestReadinessCheck:
    """Tests for the readiness endpoint."""

    @pytest.mark.asyncio
    async def test_returns_healthy_when_database_healthy(self):
        from notekeeper.backend.api.health import readiness_check

        with patch(
            "notekeeper.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ):
            result = await readiness_check()

        assert result["status"] == "healthy"
        assert result["checks"]["database"]["status"] == "healthy"
        assert "timestamp" in result

    @pytest.mark.asyncio
    async def test_raises_503_when_database_unhealthy(self):
        from notekeeper.backend.api.health import readiness_check

        with patch(
            "notekeeper.backend.api.health.check_database",
            AsyncMock(return_value={"status": "unhealthy", "error": "down"}),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await readiness_check()

        assert exc_info.value.status_code == 503
        assert exc_info.value.detail["status"] == "unhealthy"


class TestDetailedHealthCheck:
    """Tests for the detailed endpoint."""

    @pytest.mark.asyncio
    async def test_returns_application_info_and_checks(self):
        from notekeeper.backend.api.health import detailed_health_check
        from notekeeper.backend.core.config import get_app_config

        with patch(
            "notekeeper.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ):
            result = await detailed_health_check()

        assert result["status"] == "healthy"
        assert result["application"]["name"] == get_app_config().application.name
        assert "rest_api_enabled" in result["features"]
        assert result["checks"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_returns_unhealthy_when_check_fails(self):
        from notekeeper.backend.api.health import detailed_health_check

        with patch(
            "notekeeper.backend.api.health.check_database",
            AsyncMock(return_value={"status": "unhealthy", "error": "down"}),
        ):
            result = await detailed_health_check()

        assert result["status"] == "unhealthy"
