"""Purchase ORM model: crypto_purchases."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Double, Index, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database import Base


class CryptoPurchase(Base):
    """A single recorded crypto purchase.

    purchase_price_usd is the historical USD price at purchase_date, resolved
    once when the row is created.  Rows are never updated by the application;
    updated_at exists for manual corrections made directly in the database.
    """

    __tablename__ = "crypto_purchases"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_crypto_purchases_amount_positive"),
        Index("ix_crypto_purchases_purchase_date", "purchase_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    symbol: Mapped[str] = mapped_column(Text, nullable=False)
    purchase_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    amount: Mapped[float] = mapped_column(Double, nullable=False)
    purchase_price_usd: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
