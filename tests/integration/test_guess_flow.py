"""Integration tests: price snapshots, guess submission and the resolution job."""

from collections.abc import Awaitable, Callable
from unittest.mock import AsyncMock

from httpx import AsyncClient

from config.settings import settings
from src.bg_common.enums import CycleStatus
from src.bg_guesses.infrastructure.persistence import GuessRepository
from src.bg_prices.domain.models import PriceSnapshot
from src.bg_prices.infrastructure.persistence import PriceSnapshotRepository
from src.bg_resolution.application.engine import ResolutionEngine
from src.bg_scores.infrastructure.persistence import ScoreRepository
from src.bg_store.infrastructure.memory_store import InMemoryStore

RegisterFn = Callable[[], Awaitable[dict[str, str]]]
SeedFn = Callable[[float], Awaitable[PriceSnapshot]]


def _engine(store: InMemoryStore, price: float) -> ResolutionEngine:
    feed = AsyncMock()
    feed.fetch_price.return_value = price
    collections = settings.collections
    return ResolutionEngine(
        feed,
        PriceSnapshotRepository(store, collections.price_snapshots),
        GuessRepository(store, collections.guesses),
        ScoreRepository(store, collections.users),
    )


class TestPriceSnapshots:
    async def test_latest_is_null_before_first_poll(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/price-snapshots/latest")
        assert resp.status_code == 200
        assert resp.json()["data"] is None

    async def test_list_and_latest(self, client: AsyncClient, seed_snapshot: SeedFn) -> None:
        await seed_snapshot(100.0)
        newest = await seed_snapshot(101.0)

        listed = (await client.get("/api/v1/price-snapshots")).json()["data"]["items"]
        assert [s["id"] for s in listed][0] == newest.id
        assert len(listed) == 2

        latest = (await client.get("/api/v1/price-snapshots/latest")).json()["data"]
        assert latest["id"] == newest.id
        assert latest["price"] == 101.0

    async def test_get_by_id(self, client: AsyncClient, seed_snapshot: SeedFn) -> None:
        snap = await seed_snapshot(42.0)
        resp = await client.get(f"/api/v1/price-snapshots/{snap.id}")
        assert resp.status_code == 200
        assert resp.json()["data"]["price"] == 42.0

    async def test_get_unknown_id(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/price-snapshots/nope")
        assert resp.status_code == 404
        assert resp.json()["code"] == 2001


class TestSubmitGuess:
    async def test_requires_auth(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/guesses", json={"direction": "UP"})
        assert resp.status_code == 401

    async def test_no_snapshot_yet(self, client: AsyncClient, register: RegisterFn) -> None:
        headers = await register()
        resp = await client.post("/api/v1/guesses", json={"direction": "UP"}, headers=headers)
        assert resp.status_code == 409
        assert resp.json()["code"] == 2002

    async def test_anchored_to_latest(
        self, client: AsyncClient, register: RegisterFn, seed_snapshot: SeedFn
    ) -> None:
        headers = await register()
        snap = await seed_snapshot(100.0)
        resp = await client.post("/api/v1/guesses", json={"direction": "DOWN"}, headers=headers)
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["price_snapshot_id"] == snap.id
        assert data["direction"] == "DOWN"
        assert data["is_correct"] is None
        assert data["outcome"] == "UNRESOLVED"

    async def test_stale_snapshot_rejected(
        self, client: AsyncClient, register: RegisterFn, seed_snapshot: SeedFn
    ) -> None:
        headers = await register()
        old = await seed_snapshot(100.0)
        await seed_snapshot(101.0)
        resp = await client.post(
            "/api/v1/guesses",
            json={"direction": "UP", "price_snapshot_id": old.id},
            headers=headers,
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 3003

    async def test_invalid_direction(
        self, client: AsyncClient, register: RegisterFn, seed_snapshot: SeedFn
    ) -> None:
        headers = await register()
        await seed_snapshot(100.0)
        resp = await client.post("/api/v1/guesses", json={"direction": "FLAT"}, headers=headers)
        assert resp.status_code == 422


class TestListGuesses:
    async def test_me_only_returns_own_guesses(
        self, client: AsyncClient, register: RegisterFn, seed_snapshot: SeedFn
    ) -> None:
        alice = await register()
        bob = await register()
        await seed_snapshot(100.0)
        await client.post("/api/v1/guesses", json={"direction": "UP"}, headers=alice)
        await client.post("/api/v1/guesses", json={"direction": "DOWN"}, headers=alice)
        await client.post("/api/v1/guesses", json={"direction": "UP"}, headers=bob)

        mine = (await client.get("/api/v1/guesses/me", headers=alice)).json()["data"]["items"]
        everyone = (await client.get("/api/v1/guesses", headers=bob)).json()["data"]["items"]
        assert len(mine) == 2
        assert len(everyone) == 3


class TestResolutionRoundTrip:
    async def test_cycle_resolves_guesses_and_updates_scores(
        self,
        client: AsyncClient,
        store: InMemoryStore,
        register: RegisterFn,
        seed_snapshot: SeedFn,
    ) -> None:
        bull = await register()
        bear = await register()
        await seed_snapshot(100.0)
        await client.post("/api/v1/guesses", json={"direction": "UP"}, headers=bull)
        await client.post("/api/v1/guesses", json={"direction": "DOWN"}, headers=bear)

        report = await _engine(store, 110.0).run_cycle()
        assert report.status is CycleStatus.COMPLETED
        assert report.resolved == 2

        bull_me = (await client.get("/api/v1/users/me", headers=bull)).json()["data"]
        bear_me = (await client.get("/api/v1/users/me", headers=bear)).json()["data"]
        assert bull_me["score"] == 1
        assert bear_me["score"] == -1

        bull_guess = (await client.get("/api/v1/guesses/me", headers=bull)).json()["data"]["items"][0]
        assert bull_guess["is_correct"] is True
        assert bull_guess["outcome"] == "CORRECT"

        latest = (await client.get("/api/v1/price-snapshots/latest")).json()["data"]
        assert latest["id"] == report.snapshot_id
        assert latest["price"] == 110.0

    async def test_second_cycle_does_not_rescore(
        self,
        client: AsyncClient,
        store: InMemoryStore,
        register: RegisterFn,
        seed_snapshot: SeedFn,
    ) -> None:
        headers = await register()
        await seed_snapshot(100.0)
        await client.post("/api/v1/guesses", json={"direction": "UP"}, headers=headers)

        await _engine(store, 110.0).run_cycle()
        second = await _engine(store, 90.0).run_cycle()

        assert second.pending == 0
        me = (await client.get("/api/v1/users/me", headers=headers)).json()["data"]
        assert me["score"] == 1
