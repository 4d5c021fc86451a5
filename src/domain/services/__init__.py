"""Domain services package."""

from .symbols import SymbolRegistry
from .valuation import ValuationEngine, ValuationService

__all__ = ["SymbolRegistry", "ValuationEngine", "ValuationService"]
