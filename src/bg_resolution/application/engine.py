"""ResolutionEngine: the periodic price-poll and guess-resolution cycle.

One cycle, fully sequential:

  1. Poll     PriceFeed.fetch_price()           failure -> abort cycle
  2. Persist  snapshot(timestamp=now, price)    failure -> abort cycle
  3. List     unresolved guesses                failure -> abort cycle
  4. Resolve  each guess independently against the price polled in step 1:
       - anchored to the step-2 snapshot -> deferred to the next cycle
       - referenced snapshot missing   -> warn, leave unresolved
       - verdict via judge()            -> resolve (guarded, once only)
       - score delta +1 / -1            -> ScoreRepository.apply_delta
     any error on one guess is logged and the batch continues.

A failed poll never reaches resolution and one failing guess does not block
the others. The store offers no transactions, so a guess whose score update
fails after it was resolved stays resolved; that case is logged with the
lost delta.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from src.bg_common.datetime_utils import utc_now
from src.bg_common.enums import CycleStatus, GuessOutcome
from src.bg_common.errors import (
    AppError,
    GuessAlreadyResolvedError,
    PriceFeedError,
    StoreError,
)
from src.bg_guesses.domain.models import Guess
from src.bg_guesses.domain.repository import GuessRepositoryProtocol
from src.bg_prices.domain.repository import (
    PriceFeedProtocol,
    PriceSnapshotRepositoryProtocol,
)
from src.bg_resolution.domain.models import CycleReport
from src.bg_resolution.domain.verdict import judge, score_delta
from src.bg_scores.domain.repository import ScoreRepositoryProtocol

logger = logging.getLogger(__name__)


class ResolutionEngine:
    def __init__(
        self,
        price_feed: PriceFeedProtocol,
        snapshot_repo: PriceSnapshotRepositoryProtocol,
        guess_repo: GuessRepositoryProtocol,
        score_repo: ScoreRepositoryProtocol,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._feed = price_feed
        self._snapshots = snapshot_repo
        self._guesses = guess_repo
        self._scores = score_repo
        self._clock = clock

    async def run_cycle(self) -> CycleReport:
        # Step 1: poll
        try:
            price = await self._feed.fetch_price()
        except PriceFeedError as exc:
            logger.error("Resolution cycle aborted: %s", exc.message)
            return CycleReport(status=CycleStatus.FEED_FAILED)

        report = CycleReport(status=CycleStatus.COMPLETED, price=price)

        # Step 2: persist
        try:
            snapshot = await self._snapshots.create(self._clock(), price)
        except (StoreError, ValueError) as exc:
            logger.error("Resolution cycle aborted, snapshot not stored (price=%s): %s", price, exc)
            report.status = CycleStatus.PERSIST_FAILED
            return report
        report.snapshot_id = snapshot.id
        logger.info("Stored price snapshot %s: %s at %s", snapshot.id, price, snapshot.timestamp.isoformat())

        # Step 3: enumerate
        try:
            pending = await self._guesses.list_unresolved()
        except StoreError as exc:
            logger.error("Resolution cycle aborted, cannot list unresolved guesses: %s", exc)
            report.status = CycleStatus.ENUMERATE_FAILED
            return report
        report.pending = len(pending)
        if not pending:
            return report

        # Step 4: resolve each guess in isolation
        for guess in pending:
            if guess.price_snapshot_id == snapshot.id:
                # Anchored to this cycle's own reading: stays unresolved and is
                # judged against the next cycle's price
                report.deferred += 1
                continue
            await self._resolve_one(guess, price, report)

        logger.info(
            "Resolution cycle done: price=%s pending=%d resolved=%d (correct=%d incorrect=%d) "
            "missing_snapshot=%d conflicts=%d failed=%d",
            price, report.pending, report.resolved, report.correct, report.incorrect,
            report.skipped_missing_snapshot, report.conflicts, report.failed,
        )
        return report

    async def _resolve_one(self, guess: Guess, current_price: float, report: CycleReport) -> None:
        try:
            reference = await self._snapshots.find_by_id(guess.price_snapshot_id)
        except StoreError as exc:
            logger.error("Guess %s: snapshot lookup failed: %s", guess.id, exc)
            report.failed += 1
            return

        if reference is None:
            logger.warning(
                "Guess %s references missing snapshot %s; left unresolved",
                guess.id, guess.price_snapshot_id,
            )
            report.skipped_missing_snapshot += 1
            return

        outcome = judge(guess.direction, reference.price, current_price)

        try:
            await self._guesses.resolve(guess.id, outcome is GuessOutcome.CORRECT)
        except GuessAlreadyResolvedError:
            logger.warning("Guess %s was already resolved; no score change", guess.id)
            report.conflicts += 1
            return
        except AppError as exc:
            logger.error("Guess %s: resolve failed: %s", guess.id, exc.message)
            report.failed += 1
            return

        delta = score_delta(outcome)
        try:
            await self._scores.apply_delta(guess.user_id, delta)
        except AppError as exc:
            logger.error(
                "Guess %s resolved %s but score delta %+d for user %s was not applied: %s",
                guess.id, outcome.value, delta, guess.user_id, exc.message,
            )
            report.failed += 1
            return

        report.resolved += 1
        if outcome is GuessOutcome.CORRECT:
            report.correct += 1
        else:
            report.incorrect += 1
        logger.debug(
            "Guess %s (%s, ref=%s, now=%s) -> %s, user %s %+d",
            guess.id, guess.direction.value, reference.price, current_price,
            outcome.value, guess.user_id, delta,
        )
