"""Price oracle implementations."""

from .coingecko import CoinGeckoPriceOracle

__all__ = ["CoinGeckoPriceOracle"]
