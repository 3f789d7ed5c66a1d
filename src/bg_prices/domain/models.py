"""Domain models for bg_prices: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PriceSnapshot:
    """One timestamped BTC/USDT reading. Never updated after creation."""

    id: str
    timestamp: datetime   # when the price was observed
    price: float
    created_at: datetime  # when the document was written
