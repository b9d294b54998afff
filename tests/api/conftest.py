"""Shared fixtures for API tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.infrastructure.database import get_session
from storefront.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client for endpoints that do not touch the catalog store."""
    return TestClient(app)


@pytest_asyncio.fixture
async def api(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async client whose requests use the test database.

    The client runs on the test event loop so requests share the
    in-memory database with the fixtures.
    """

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
