"""Domain models for bg_resolution."""

from dataclasses import dataclass

from src.bg_common.enums import CycleStatus


@dataclass
class CycleReport:
    """Outcome counters for one resolution cycle."""

    status: CycleStatus
    price: float | None = None
    snapshot_id: str | None = None
    pending: int = 0
    resolved: int = 0
    correct: int = 0
    incorrect: int = 0
    deferred: int = 0                  # anchored to this cycle's own snapshot
    skipped_missing_snapshot: int = 0  # dangling priceSnapshotId
    conflicts: int = 0                 # already resolved by a concurrent writer
    failed: int = 0                    # per-item store/app errors
