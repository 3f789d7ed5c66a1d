"""Wire the resolution job from settings: feed, repositories, lease, scheduler."""

from config.settings import Settings
from src.bg_guesses.infrastructure.persistence import GuessRepository
from src.bg_prices.infrastructure.binance_feed import BinancePriceFeed
from src.bg_prices.infrastructure.persistence import PriceSnapshotRepository
from src.bg_resolution.application.engine import ResolutionEngine
from src.bg_resolution.application.scheduler import ResolutionScheduler
from src.bg_resolution.domain.lease import CycleLeaseProtocol
from src.bg_resolution.infrastructure.redis_lease import RedisCycleLease
from src.bg_scores.infrastructure.persistence import ScoreRepository
from src.bg_store.domain.store import StoreProtocol


def build_engine(store: StoreProtocol, settings: Settings) -> ResolutionEngine:
    collections = settings.collections
    return ResolutionEngine(
        price_feed=BinancePriceFeed(
            url=settings.PRICE_FEED_URL,
            timeout_seconds=settings.PRICE_FEED_TIMEOUT_SECONDS,
        ),
        snapshot_repo=PriceSnapshotRepository(store, collections.price_snapshots),
        guess_repo=GuessRepository(store, collections.guesses),
        score_repo=ScoreRepository(store, collections.users),
    )


def build_lease(settings: Settings) -> RedisCycleLease | None:
    """The Redis lease when RESOLUTION_LEASE_ENABLED, else None."""
    if not settings.RESOLUTION_LEASE_ENABLED:
        return None
    return RedisCycleLease.from_url(
        settings.REDIS_URL,
        key=settings.RESOLUTION_LEASE_KEY,
        ttl_seconds=settings.RESOLUTION_LEASE_TTL_SECONDS,
    )


def build_scheduler(
    store: StoreProtocol,
    settings: Settings,
    lease: CycleLeaseProtocol | None = None,
) -> ResolutionScheduler:
    return ResolutionScheduler(
        build_engine(store, settings),
        interval_seconds=settings.RESOLUTION_INTERVAL_SECONDS,
        lease=lease,
    )
