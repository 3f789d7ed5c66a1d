"""ResolutionScheduler: fixed-cadence driver for ResolutionEngine.

A tick fires every ``interval_seconds`` regardless of how long the previous
cycle took; each tick runs as its own task. Overlap is prevented by a
single-flight flag (a tick that finds the previous cycle still in flight is
skipped) and, across processes, by an optional lease.

``tick()`` never raises: whatever escapes the engine is logged here.
"""

import asyncio
import logging

from src.bg_common.enums import CycleStatus
from src.bg_resolution.application.engine import ResolutionEngine
from src.bg_resolution.domain.lease import CycleLeaseProtocol
from src.bg_resolution.domain.models import CycleReport

logger = logging.getLogger(__name__)


class ResolutionScheduler:
    def __init__(
        self,
        engine: ResolutionEngine,
        interval_seconds: float = 60.0,
        lease: CycleLeaseProtocol | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._engine = engine
        self._interval = interval_seconds
        self._lease = lease
        self._in_flight = False
        self._stop_event = asyncio.Event()
        self._loop_task: asyncio.Task[None] | None = None
        self._cycle_tasks: set[asyncio.Task[CycleReport]] = set()
        self.last_report: CycleReport | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def tick(self) -> CycleReport:
        if self._in_flight:
            logger.warning("Previous resolution cycle still running; tick skipped")
            return CycleReport(status=CycleStatus.SKIPPED)

        self._in_flight = True
        try:
            report = await self._run_with_lease()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Unexpected error in resolution cycle")
            report = CycleReport(status=CycleStatus.ERRORED)
        finally:
            self._in_flight = False

        self.last_report = report
        return report

    async def _run_with_lease(self) -> CycleReport:
        if self._lease is None:
            return await self._engine.run_cycle()

        if not await self._lease.acquire():
            logger.info("Resolution lease not acquired; tick skipped")
            return CycleReport(status=CycleStatus.SKIPPED)
        try:
            return await self._engine.run_cycle()
        finally:
            await self._lease.release()

    async def run(self) -> None:
        logger.info("Resolution scheduler started (interval=%.0fs)", self._interval)
        while not self._stop_event.is_set():
            task = asyncio.create_task(self.tick())
            self._cycle_tasks.add(task)
            task.add_done_callback(self._cycle_tasks.discard)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Resolution scheduler stopped")

    def start(self) -> None:
        if self._loop_task is not None and not self._loop_task.done():
            return
        self._stop_event.clear()
        self._loop_task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop scheduling new ticks and wait for the in-flight cycle to finish."""
        self._stop_event.set()
        if self._loop_task is not None:
            await self._loop_task
            self._loop_task = None
        if self._cycle_tasks:
            await asyncio.gather(*self._cycle_tasks, return_exceptions=True)
