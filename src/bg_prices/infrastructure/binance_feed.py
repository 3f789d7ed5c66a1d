"""Binance spot ticker as the PriceFeed collaborator.

GET /api/v3/ticker/price?symbol=BTCUSDT -> {"symbol": "BTCUSDT", "price": "67123.45000000"}

Every failure mode (transport error, timeout, non-2xx, malformed JSON,
missing or non-numeric price) is reported as PriceFeedError so the caller
has exactly one exception to handle.
"""

import logging
import math
from typing import Any

import httpx

from src.bg_common.errors import PriceFeedError

logger = logging.getLogger(__name__)

_BINANCE_TICKER_URL = "https://api.binance.com/api/v3/ticker/price?symbol=BTCUSDT"


def parse_ticker_price(payload: Any) -> float:
    """Extract a finite, non-negative float from a ticker payload."""
    if not isinstance(payload, dict):
        raise PriceFeedError("ticker payload is not a JSON object")

    raw = payload.get("price")
    if raw is None or raw == "":
        raise PriceFeedError("missing price value in ticker response")
    if isinstance(raw, bool):
        raise PriceFeedError(f"non-numeric price value: {raw!r}")
    try:
        price = float(raw)
    except (TypeError, ValueError):
        raise PriceFeedError(f"non-numeric price value: {raw!r}") from None

    if not math.isfinite(price) or price < 0:
        raise PriceFeedError(f"price out of range: {raw!r}")
    return price


class BinancePriceFeed:
    def __init__(
        self,
        url: str = _BINANCE_TICKER_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._transport = transport

    async def fetch_price(self) -> float:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as exc:
            raise PriceFeedError(f"timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise PriceFeedError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise PriceFeedError("malformed JSON in ticker response") from exc

        price = parse_ticker_price(payload)
        logger.debug("Ticker price %s from %s", price, self._url)
        return price
