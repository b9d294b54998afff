"""Tests for health check endpoints."""

from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from storefront.infrastructure.database import get_session
from storefront.main import app


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client."""
    yield TestClient(app)
    app.dependency_overrides.clear()


def override_session(session: MagicMock) -> None:
    """Serve the given session to request handlers."""

    async def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "storefront-catalog"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness endpoint returns ready status."""
    session = MagicMock()
    session.execute = AsyncMock()
    override_session(session)

    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"
    session.execute.assert_awaited_once()


def test_readiness_check_database_down(client: TestClient) -> None:
    """Test readiness endpoint reports an unreachable database."""
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("down")))
    override_session(session)

    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "unavailable"
