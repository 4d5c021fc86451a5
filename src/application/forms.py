"""Add-purchase form state.

Holds the raw text the user typed, the inline error to show, and whether a
submission is in flight.  Rendering is left to whatever front end drives it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.models.symbols import SymbolEntry
from src.domain.services.symbols import SymbolRegistry

DEFAULT_PURCHASE_TIME = "12:00"


@dataclass
class PurchaseForm:
    symbol: str = ""
    purchase_date: str = ""
    purchase_time: str = DEFAULT_PURCHASE_TIME
    amount: str = ""
    error: str | None = None
    submitting: bool = False
    registry: SymbolRegistry = field(default_factory=SymbolRegistry, repr=False)

    def suggestions(self) -> list[SymbolEntry]:
        """Autocomplete candidates for the current symbol text."""
        return self.registry.search(self.symbol.strip())

    def select_suggestion(self, symbol: str) -> None:
        self.symbol = symbol

    def reset(self) -> None:
        self.symbol = ""
        self.purchase_date = ""
        self.purchase_time = DEFAULT_PURCHASE_TIME
        self.amount = ""
        self.error = None
