"""PriceSnapshotRepository: append-only snapshot log on the document store.

Document layout: {id, timestamp, price, createdAt}; timestamps are ISO-8601.
"""

import logging
import math
import uuid
from datetime import datetime
from typing import Any

from src.bg_common.datetime_utils import parse_iso, to_iso, utc_now
from src.bg_common.errors import MalformedItemError
from src.bg_prices.domain.models import PriceSnapshot
from src.bg_store.domain.store import StoreProtocol

logger = logging.getLogger(__name__)


def _item_to_snapshot(item: dict[str, Any], collection: str) -> PriceSnapshot:
    try:
        return PriceSnapshot(
            id=item["id"],
            timestamp=parse_iso(item["timestamp"]),
            price=float(item["price"]),
            created_at=parse_iso(item["createdAt"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedItemError(collection, str(item.get("id")), repr(exc)) from exc


class PriceSnapshotRepository:
    def __init__(self, store: StoreProtocol, collection: str) -> None:
        self._store = store
        self._collection = collection

    async def create(self, timestamp: datetime, price: float) -> PriceSnapshot:
        if not math.isfinite(price) or price < 0:
            raise ValueError(f"Price must be finite and non-negative, got {price}")

        snapshot = PriceSnapshot(
            id=str(uuid.uuid4()),
            timestamp=timestamp,
            price=float(price),
            created_at=utc_now(),
        )
        await self._store.put(
            self._collection,
            {
                "id": snapshot.id,
                "timestamp": to_iso(snapshot.timestamp),
                "price": snapshot.price,
                "createdAt": to_iso(snapshot.created_at),
            },
        )
        return snapshot

    async def find_by_id(self, snapshot_id: str) -> PriceSnapshot | None:
        item = await self._store.get(self._collection, snapshot_id)
        return _item_to_snapshot(item, self._collection) if item else None

    async def find_all(self) -> list[PriceSnapshot]:
        """Every well-formed snapshot; malformed documents are logged and skipped."""
        snapshots = []
        for item in await self._store.scan(self._collection):
            try:
                snapshots.append(_item_to_snapshot(item, self._collection))
            except MalformedItemError as exc:
                logger.warning("Skipping snapshot: %s", exc.message)
        return snapshots

    async def find_latest(self) -> PriceSnapshot | None:
        """Snapshot with the greatest observation ``timestamp``.

        Equal timestamps: whichever the scan yields first wins; scan order is
        not defined, so the choice between them is arbitrary.
        """
        latest: PriceSnapshot | None = None
        for snapshot in await self.find_all():
            if latest is None or snapshot.timestamp > latest.timestamp:
                latest = snapshot
        return latest
