"""Valuation domain models.

Everything here is derived and ephemeral: nothing is persisted, and every
refresh cycle rebuilds positions and the snapshot from scratch.

A position missing either price contributes nothing to profit/loss or to the
portfolio totals.  It is excluded, never treated as zero.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .enums import PriceStatus
from .purchases import PurchaseRecord


class PriceOutcome(BaseModel):
    """Result of one per-symbol price fetch: Known(price) or Unknown."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    status: PriceStatus
    price: float | None = None
    reason: str | None = None

    @classmethod
    def known(cls, symbol: str, price: float) -> PriceOutcome:
        return cls(symbol=symbol, status=PriceStatus.KNOWN, price=price)

    @classmethod
    def unknown(cls, symbol: str, reason: str | None = None) -> PriceOutcome:
        return cls(symbol=symbol, status=PriceStatus.UNKNOWN, reason=reason)

    @property
    def is_known(self) -> bool:
        return self.status == PriceStatus.KNOWN


class ValuedPosition(BaseModel):
    """A purchase record valued against the current market price.

    profit_loss and profit_loss_percent are None unless both the current
    price and the purchase price are known.
    """

    model_config = ConfigDict(frozen=True)

    record: PurchaseRecord
    current_price: float | None = None
    profit_loss: float | None = None
    profit_loss_percent: float | None = None

    @classmethod
    def from_record(cls, record: PurchaseRecord, current_price: float | None) -> ValuedPosition:
        purchase_price = record.purchase_price_usd
        if current_price is None or purchase_price is None:
            return cls(record=record, current_price=current_price)

        delta = current_price - purchase_price
        return cls(
            record=record,
            current_price=current_price,
            profit_loss=delta * record.amount,
            profit_loss_percent=delta / purchase_price * 100,
        )

    @property
    def is_priced(self) -> bool:
        return self.profit_loss is not None

    @property
    def cost_basis(self) -> float | None:
        if self.record.purchase_price_usd is None:
            return None
        return self.record.purchase_price_usd * self.record.amount

    @property
    def current_value(self) -> float | None:
        if self.current_price is None:
            return None
        return self.current_price * self.record.amount


class PortfolioSnapshot(BaseModel):
    """Aggregate profit/loss over a set of valued positions."""

    model_config = ConfigDict(frozen=True)

    total_value: float = 0.0
    total_cost: float = 0.0
    total_profit_loss: float = 0.0
    total_profit_loss_percent: float = 0.0
    position_count: int = 0
    priced_count: int = 0

    @classmethod
    def from_positions(cls, positions: list[ValuedPosition] | tuple[ValuedPosition, ...]) -> PortfolioSnapshot:
        """Sum value and cost over positions where both prices are known.

        total_profit_loss_percent is 0.0 when total_cost is zero.
        """
        priced = [p for p in positions if p.is_priced]
        total_value = sum(p.current_value for p in priced)
        total_cost = sum(p.cost_basis for p in priced)
        total_profit_loss = total_value - total_cost
        percent = total_profit_loss / total_cost * 100 if total_cost != 0 else 0.0
        return cls(
            total_value=total_value,
            total_cost=total_cost,
            total_profit_loss=total_profit_loss,
            total_profit_loss_percent=percent,
            position_count=len(positions),
            priced_count=len(priced),
        )


class PortfolioView(BaseModel):
    """The displayed portfolio: ordered positions plus their snapshot.

    Replaced wholesale on every valuation pass, so readers see either the old
    or the new complete view and never a mix.  valued_at is None until the
    first pass over this record set has completed.
    """

    model_config = ConfigDict(frozen=True)

    positions: tuple[ValuedPosition, ...] = ()
    snapshot: PortfolioSnapshot = Field(default_factory=PortfolioSnapshot)
    valued_at: datetime | None = None

    @classmethod
    def from_positions(
        cls,
        positions: list[ValuedPosition] | tuple[ValuedPosition, ...],
        valued_at: datetime | None = None,
    ) -> PortfolioView:
        positions = tuple(positions)
        return cls(
            positions=positions,
            snapshot=PortfolioSnapshot.from_positions(positions),
            valued_at=valued_at,
        )

    @classmethod
    def unpriced(cls, records: list[PurchaseRecord]) -> PortfolioView:
        return cls.from_positions([ValuedPosition.from_record(r, None) for r in records])

    @property
    def records(self) -> list[PurchaseRecord]:
        return [p.record for p in self.positions]

    @property
    def is_empty(self) -> bool:
        return not self.positions

    def without(self, record_id: UUID) -> PortfolioView:
        """Return a copy with one record removed and the snapshot recomputed."""
        return PortfolioView.from_positions(
            [p for p in self.positions if p.record.id != record_id],
            valued_at=self.valued_at,
        )
