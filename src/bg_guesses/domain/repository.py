# src/bg_guesses/domain/repository.py
"""Repository Protocol for the guess ledger."""

from typing import Protocol

from src.bg_common.enums import GuessDirection
from src.bg_guesses.domain.models import Guess


class GuessRepositoryProtocol(Protocol):
    async def create(
        self,
        price_snapshot_id: str,
        direction: GuessDirection,
        user_id: str,
    ) -> Guess: ...

    async def list_all(self) -> list[Guess]: ...

    async def list_by_user(self, user_id: str) -> list[Guess]: ...

    async def list_unresolved(self) -> list[Guess]: ...

    async def resolve(self, guess_id: str, is_correct: bool) -> Guess: ...
