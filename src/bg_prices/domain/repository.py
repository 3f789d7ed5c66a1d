# src/bg_prices/domain/repository.py
"""Protocols for the price side: dependency inversion for testability.

Unit tests inject mocks conforming to these Protocols; the infrastructure
layer provides the store-backed repository and the Binance ticker feed.
"""

from datetime import datetime
from typing import Protocol

from src.bg_prices.domain.models import PriceSnapshot


class PriceSnapshotRepositoryProtocol(Protocol):
    async def create(self, timestamp: datetime, price: float) -> PriceSnapshot: ...

    async def find_by_id(self, snapshot_id: str) -> PriceSnapshot | None: ...

    async def find_all(self) -> list[PriceSnapshot]: ...

    async def find_latest(self) -> PriceSnapshot | None: ...


class PriceFeedProtocol(Protocol):
    async def fetch_price(self) -> float:
        """Current price; raises PriceFeedError on any failure."""
        ...
