# src/bg_scores/domain/repository.py
"""Repository Protocol for the score ledger."""

from typing import Protocol


class ScoreRepositoryProtocol(Protocol):
    async def apply_delta(self, user_id: str, delta: int) -> int:
        """Add ``delta`` to the user's score and return the new total."""
        ...

    async def get_score(self, user_id: str) -> int: ...
