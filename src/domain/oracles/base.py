"""Price oracle interface.

A PriceOracle quotes USD prices for a ticker symbol.  Both operations are
single request/response calls with no retry; any failure surfaces as
PriceUnavailable.  Concrete implementations live in src/infrastructure/pricing/.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class PriceOracle(ABC):
    """Abstract source of current and historical USD prices."""

    @abstractmethod
    async def fetch_current_price(self, symbol: str) -> float:
        """Return the spot USD price for symbol, or raise PriceUnavailable."""

    @abstractmethod
    async def fetch_historical_price(self, symbol: str, timestamp: datetime) -> float:
        """Return the USD price on timestamp's calendar date, or raise PriceUnavailable.

        Lookups are date-granular; the time-of-day portion is ignored.
        """

    async def aclose(self) -> None:
        """Release any network resources held by the oracle."""
