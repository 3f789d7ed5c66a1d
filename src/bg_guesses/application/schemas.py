"""Pydantic request/response schemas for bg_guesses."""

from pydantic import BaseModel, Field

from src.bg_common.enums import GuessDirection
from src.bg_guesses.domain.models import Guess


class CreateGuessRequest(BaseModel):
    direction: GuessDirection
    # Optional: when given it must be the latest snapshot the client saw
    price_snapshot_id: str | None = Field(None, min_length=1, max_length=64)


class GuessOut(BaseModel):
    id: str
    user_id: str
    price_snapshot_id: str
    direction: str
    is_correct: bool | None
    outcome: str
    created_at: str

    @classmethod
    def from_domain(cls, g: Guess) -> "GuessOut":
        return cls(
            id=g.id,
            user_id=g.user_id,
            price_snapshot_id=g.price_snapshot_id,
            direction=g.direction.value,
            is_correct=g.is_correct,
            outcome=g.outcome.value,
            created_at=g.created_at.isoformat(),
        )


class GuessListResponse(BaseModel):
    items: list[GuessOut]
