"""Pydantic response schemas for bg_prices."""

from pydantic import BaseModel

from src.bg_prices.domain.models import PriceSnapshot


class PriceSnapshotOut(BaseModel):
    id: str
    timestamp: str
    price: float
    created_at: str

    @classmethod
    def from_domain(cls, s: PriceSnapshot) -> "PriceSnapshotOut":
        return cls(
            id=s.id,
            timestamp=s.timestamp.isoformat(),
            price=s.price,
            created_at=s.created_at.isoformat(),
        )


class PriceSnapshotListResponse(BaseModel):
    items: list[PriceSnapshotOut]
