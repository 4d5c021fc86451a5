"""Domain model package.

All domain objects are pure Python / Pydantic models with no ORM or
infrastructure dependencies.  Import from this package to avoid coupling
application code to individual module paths.
"""

from .enums import PriceStatus
from .purchases import NewPurchase, PurchaseRecord
from .symbols import SymbolEntry
from .valuation import PortfolioSnapshot, PortfolioView, PriceOutcome, ValuedPosition

__all__ = [
    # enums
    "PriceStatus",
    # purchases
    "NewPurchase",
    "PurchaseRecord",
    # symbols
    "SymbolEntry",
    # valuation
    "PriceOutcome",
    "ValuedPosition",
    "PortfolioSnapshot",
    "PortfolioView",
]
