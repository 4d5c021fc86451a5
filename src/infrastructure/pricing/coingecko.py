"""CoinGecko implementation of PriceOracle.

Endpoints (API v3):
    GET /simple/price?ids=<id>&vs_currencies=usd   → {"<id>": {"usd": 123.4}}
    GET /coins/<id>/history?date=dd-mm-yyyy        → {"market_data": {"current_price": {"usd": 123.4}}}

Every failure mode (transport error, timeout, non-2xx status, malformed JSON,
missing or non-positive price) is reported as PriceUnavailable.  There is no
retry; the caller decides whether to try again.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from src.domain.errors import PriceUnavailable
from src.domain.oracles.base import PriceOracle
from src.domain.services.symbols import SymbolRegistry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_TIMEOUT_SECONDS = 10.0


def format_history_date(timestamp: datetime) -> str:
    """Format the calendar date of timestamp as dd-mm-yyyy; time is dropped."""
    return timestamp.strftime("%d-%m-%Y")


def _usd_price(value: Any) -> float | None:
    # bool is an int subclass; a JSON true is not a price.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None


class CoinGeckoPriceOracle(PriceOracle):
    def __init__(
        self,
        registry: SymbolRegistry,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._registry = registry
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        headers = {"Accept": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers)
        self._timeout = timeout

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_current_price(self, symbol: str) -> float:
        coin_id = self._registry.resolve_oracle_id(symbol)
        payload = await self._get_json(
            symbol,
            f"{self._base_url}/simple/price",
            params={"ids": coin_id, "vs_currencies": "usd"},
        )
        entry = payload.get(coin_id) if isinstance(payload, dict) else None
        price = _usd_price(entry.get("usd")) if isinstance(entry, dict) else None
        if price is None:
            raise self._unavailable(symbol, f"price not found for {symbol} ({coin_id})")
        return price

    async def fetch_historical_price(self, symbol: str, timestamp: datetime) -> float:
        coin_id = self._registry.resolve_oracle_id(symbol)
        date_str = format_history_date(timestamp)
        payload = await self._get_json(
            symbol,
            f"{self._base_url}/coins/{coin_id}/history",
            params={"date": date_str},
        )
        price = None
        if isinstance(payload, dict):
            market_data = payload.get("market_data")
            if isinstance(market_data, dict):
                current = market_data.get("current_price")
                if isinstance(current, dict):
                    price = _usd_price(current.get("usd"))
        if price is None:
            raise self._unavailable(
                symbol, f"historical price not found for {symbol} ({coin_id}) on {date_str}"
            )
        return price

    async def _get_json(self, symbol: str, url: str, params: dict[str, str]) -> Any:
        try:
            response = await self._client.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            raise self._unavailable(symbol, f"request timed out after {self._timeout:g}s") from exc
        except httpx.HTTPError as exc:
            raise self._unavailable(symbol, f"request failed: {exc}") from exc

        if not response.is_success:
            raise self._unavailable(symbol, f"API returned {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise self._unavailable(symbol, "malformed JSON response") from exc

    @staticmethod
    def _unavailable(symbol: str, reason: str) -> PriceUnavailable:
        logger.warning("Error fetching price for %s: %s", symbol, reason)
        return PriceUnavailable(symbol, reason)
