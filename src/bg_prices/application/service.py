"""PriceSnapshotApplicationService: read-only composition over the repository."""

from src.bg_common.errors import PriceSnapshotNotFoundError
from src.bg_prices.application.schemas import PriceSnapshotListResponse, PriceSnapshotOut
from src.bg_prices.domain.repository import PriceSnapshotRepositoryProtocol


class PriceSnapshotApplicationService:
    def __init__(self, repo: PriceSnapshotRepositoryProtocol) -> None:
        self._repo = repo

    async def list_snapshots(self) -> PriceSnapshotListResponse:
        # Scan order is undefined; present newest observation first
        snapshots = sorted(
            await self._repo.find_all(), key=lambda s: s.timestamp, reverse=True
        )
        return PriceSnapshotListResponse(
            items=[PriceSnapshotOut.from_domain(s) for s in snapshots]
        )

    async def get_latest(self) -> PriceSnapshotOut | None:
        latest = await self._repo.find_latest()
        return PriceSnapshotOut.from_domain(latest) if latest else None

    async def get_snapshot(self, snapshot_id: str) -> PriceSnapshotOut:
        snapshot = await self._repo.find_by_id(snapshot_id)
        if snapshot is None:
            raise PriceSnapshotNotFoundError(snapshot_id)
        return PriceSnapshotOut.from_domain(snapshot)
