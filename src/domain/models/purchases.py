"""Purchase domain models.

NewPurchase is the create payload handed to the record store.  The store
assigns an id and creation time and returns a PurchaseRecord.  Records are
immutable after creation; the only lifecycle event is deletion.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewPurchase(BaseModel):
    """A validated purchase that has not been persisted yet.

    purchase_price_usd is the oracle's historical USD price at
    purchase_timestamp, resolved once at creation and frozen thereafter.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(min_length=1)
    purchase_timestamp: datetime
    amount: float = Field(gt=0.0)
    purchase_price_usd: float | None = Field(default=None, gt=0.0)

    @field_validator("symbol")
    @classmethod
    def _uppercase_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("purchase_timestamp")
    @classmethod
    def _timezone_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("purchase_timestamp must be timezone-aware")
        return value

    @model_validator(mode="after")
    def _not_in_future(self) -> NewPurchase:
        if self.purchase_timestamp > _utcnow():
            raise ValueError(
                f"purchase_timestamp {self.purchase_timestamp.isoformat()} is in the future"
            )
        return self


class PurchaseRecord(BaseModel):
    """A persisted purchase as returned by the record store."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    symbol: str
    purchase_timestamp: datetime
    amount: float = Field(gt=0.0)
    purchase_price_usd: float | None = Field(default=None, gt=0.0)
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_new(cls, purchase: NewPurchase) -> PurchaseRecord:
        return cls(
            symbol=purchase.symbol,
            purchase_timestamp=purchase.purchase_timestamp,
            amount=purchase.amount,
            purchase_price_usd=purchase.purchase_price_usd,
        )
