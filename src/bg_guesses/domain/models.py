"""Domain models for bg_guesses: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.bg_common.enums import GuessDirection, GuessOutcome


@dataclass(frozen=True)
class Guess:
    id: str
    user_id: str
    price_snapshot_id: str       # snapshot the prediction is anchored to
    direction: GuessDirection
    outcome: GuessOutcome        # UNRESOLVED until the resolution job judges it
    created_at: datetime

    @property
    def is_correct(self) -> bool | None:
        return self.outcome.is_correct
