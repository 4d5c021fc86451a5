"""Domain error taxonomy.

Infrastructure adapters translate library exceptions (httpx, SQLAlchemy) into
these types so application code never depends on a specific client library.

  InvalidSymbol        user input is not in the symbol registry
  InvalidPurchaseInput date, time, or amount cannot be used for a purchase
  PriceUnavailable     the price oracle failed or returned an unusable payload
  StoreFailure         the record store could not create, list, or delete
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all tracker errors."""


class InvalidSymbol(TrackerError):
    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(
            f'"{symbol}" is not a supported cryptocurrency. Please select from the suggestions.'
        )


class InvalidPurchaseInput(TrackerError):
    pass


class PriceUnavailable(TrackerError):
    def __init__(self, symbol: str, reason: str) -> None:
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Price unavailable for {symbol}: {reason}")


class StoreFailure(TrackerError):
    pass
