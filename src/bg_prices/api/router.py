"""bg_prices REST endpoints (public, no auth).

GET /price-snapshots              : all snapshots, newest observation first
GET /price-snapshots/latest       : latest snapshot, data=null when none yet
GET /price-snapshots/{snapshot_id}: single snapshot
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from config.settings import settings
from src.bg_common.response import ApiResponse, success_response
from src.bg_prices.application.service import PriceSnapshotApplicationService
from src.bg_prices.infrastructure.persistence import PriceSnapshotRepository
from src.bg_store.dependencies import get_store
from src.bg_store.domain.store import StoreProtocol

router = APIRouter(prefix="/price-snapshots", tags=["price-snapshots"])


def _get_service(
    store: Annotated[StoreProtocol, Depends(get_store)],
) -> PriceSnapshotApplicationService:
    repo = PriceSnapshotRepository(store, settings.collections.price_snapshots)
    return PriceSnapshotApplicationService(repo)


@router.get("")
async def list_snapshots(
    request: Request,
    service: Annotated[PriceSnapshotApplicationService, Depends(_get_service)],
) -> ApiResponse:
    result = await service.list_snapshots()
    return success_response(result.model_dump(), request)


@router.get("/latest")
async def get_latest_snapshot(
    request: Request,
    service: Annotated[PriceSnapshotApplicationService, Depends(_get_service)],
) -> ApiResponse:
    latest = await service.get_latest()
    return success_response(latest.model_dump() if latest else None, request)


@router.get("/{snapshot_id}")
async def get_snapshot(
    snapshot_id: str,
    request: Request,
    service: Annotated[PriceSnapshotApplicationService, Depends(_get_service)],
) -> ApiResponse:
    result = await service.get_snapshot(snapshot_id)
    return success_response(result.model_dump(), request)
