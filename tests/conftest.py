"""Shared test fixtures.

The environment is pinned before anything under ``src`` is imported:
settings are read once at import time, and the suite must run without
Postgres, Redis or the live price feed.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ["STORE_BACKEND"] = "memory"
os.environ["RESOLUTION_ENABLED"] = "false"
os.environ["RESOLUTION_LEASE_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.bg_store.infrastructure.memory_store import InMemoryStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
async def client(store: InMemoryStore) -> AsyncClient:
    """Async HTTP client for the FastAPI app, backed by a fresh in-memory store."""
    from src.bg_store.dependencies import get_store
    from src.main import app

    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
