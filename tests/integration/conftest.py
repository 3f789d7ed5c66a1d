"""Integration-test fixtures.

The app runs in-process through httpx.ASGITransport against a fresh
InMemoryStore per test (see tests/conftest.py), so no Postgres or Redis is
needed. The lifespan is not triggered: the resolution job is driven
explicitly by the tests that need it.
"""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import pytest
from httpx import AsyncClient

from config.settings import settings
from src.bg_prices.domain.models import PriceSnapshot
from src.bg_prices.infrastructure.persistence import PriceSnapshotRepository
from src.bg_store.infrastructure.memory_store import InMemoryStore


def _unique_user() -> dict[str, str]:
    return {"username": f"user_{uuid.uuid4().hex[:8]}", "password": "secret1"}


@pytest.fixture
def register(client: AsyncClient) -> Callable[[], Awaitable[dict[str, str]]]:
    """Register a fresh user; returns its Authorization header."""

    async def _register() -> dict[str, str]:
        resp = await client.post("/api/v1/auth/register", json=_unique_user())
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}

    return _register


@pytest.fixture
def snapshot_repo(store: InMemoryStore) -> PriceSnapshotRepository:
    return PriceSnapshotRepository(store, settings.collections.price_snapshots)


@pytest.fixture
def seed_snapshot(
    snapshot_repo: PriceSnapshotRepository,
) -> Callable[[float], Awaitable[PriceSnapshot]]:
    async def _seed(price: float) -> PriceSnapshot:
        return await snapshot_repo.create(datetime.now(UTC), price)

    return _seed
