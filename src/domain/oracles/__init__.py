"""Price oracle interfaces."""

from .base import PriceOracle

__all__ = ["PriceOracle"]
