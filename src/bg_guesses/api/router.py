"""bg_guesses REST endpoints (all require a Bearer token).

POST /guesses    : submit UP/DOWN against the latest price snapshot
GET  /guesses    : every guess
GET  /guesses/me : the caller's guesses, newest first
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from config.settings import settings
from src.bg_common.response import ApiResponse, success_response
from src.bg_gateway.auth.dependencies import get_current_user
from src.bg_gateway.user.models import User
from src.bg_guesses.application.schemas import CreateGuessRequest
from src.bg_guesses.application.service import GuessApplicationService
from src.bg_guesses.infrastructure.persistence import GuessRepository
from src.bg_prices.infrastructure.persistence import PriceSnapshotRepository
from src.bg_store.dependencies import get_store
from src.bg_store.domain.store import StoreProtocol

router = APIRouter(prefix="/guesses", tags=["guesses"])


def _get_service(
    store: Annotated[StoreProtocol, Depends(get_store)],
) -> GuessApplicationService:
    collections = settings.collections
    return GuessApplicationService(
        GuessRepository(store, collections.guesses),
        PriceSnapshotRepository(store, collections.price_snapshots),
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def create_guess(
    request: Request,
    body: CreateGuessRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GuessApplicationService, Depends(_get_service)],
) -> ApiResponse:
    guess = await service.submit(current_user.id, body.direction, body.price_snapshot_id)
    return success_response(guess.model_dump(), request, message="Guess recorded")


@router.get("", response_model=ApiResponse)
async def list_guesses(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GuessApplicationService, Depends(_get_service)],
) -> ApiResponse:
    result = await service.list_all()
    return success_response(result.model_dump(), request)


@router.get("/me", response_model=ApiResponse)
async def list_my_guesses(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[GuessApplicationService, Depends(_get_service)],
) -> ApiResponse:
    result = await service.list_for_user(current_user.id)
    return success_response(result.model_dump(), request)
