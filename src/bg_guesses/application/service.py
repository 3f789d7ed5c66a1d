"""GuessApplicationService: guess submission and listing.

Submission anchors every guess to the latest recorded snapshot, so the
ledger itself never has to validate the reference.
"""

import logging

from src.bg_common.enums import GuessDirection
from src.bg_common.errors import NoPriceSnapshotError, StaleSnapshotError
from src.bg_guesses.application.schemas import GuessListResponse, GuessOut
from src.bg_guesses.domain.repository import GuessRepositoryProtocol
from src.bg_prices.domain.repository import PriceSnapshotRepositoryProtocol

logger = logging.getLogger(__name__)


class GuessApplicationService:
    def __init__(
        self,
        guess_repo: GuessRepositoryProtocol,
        snapshot_repo: PriceSnapshotRepositoryProtocol,
    ) -> None:
        self._guesses = guess_repo
        self._snapshots = snapshot_repo

    async def submit(
        self,
        user_id: str,
        direction: GuessDirection,
        price_snapshot_id: str | None = None,
    ) -> GuessOut:
        latest = await self._snapshots.find_latest()
        if latest is None:
            raise NoPriceSnapshotError()
        if price_snapshot_id is not None and price_snapshot_id != latest.id:
            raise StaleSnapshotError(price_snapshot_id, latest.id)

        guess = await self._guesses.create(latest.id, direction, user_id)
        logger.info(
            "Guess %s: user=%s direction=%s snapshot=%s price=%s",
            guess.id, user_id, direction.value, latest.id, latest.price,
        )
        return GuessOut.from_domain(guess)

    async def list_all(self) -> GuessListResponse:
        guesses = await self._guesses.list_all()
        return GuessListResponse(items=[GuessOut.from_domain(g) for g in guesses])

    async def list_for_user(self, user_id: str) -> GuessListResponse:
        guesses = sorted(
            await self._guesses.list_by_user(user_id),
            key=lambda g: g.created_at,
            reverse=True,
        )
        return GuessListResponse(items=[GuessOut.from_domain(g) for g in guesses])
