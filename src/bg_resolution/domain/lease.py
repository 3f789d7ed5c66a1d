# src/bg_resolution/domain/lease.py
"""Protocol for the cross-process single-flight lease."""

from typing import Protocol


class CycleLeaseProtocol(Protocol):
    async def acquire(self) -> bool:
        """True when this process now holds the lease; never raises."""
        ...

    async def release(self) -> None:
        """Give the lease up if held; never raises."""
        ...
