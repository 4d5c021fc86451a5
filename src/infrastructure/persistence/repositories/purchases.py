"""SQLAlchemy implementation of PurchaseRepository.

The repository is long-lived (the refresh scheduler holds it for the life of
the tracker), so it owns a session factory and opens one short transaction
per call instead of binding to a single request-scoped session.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.errors import StoreFailure
from src.domain.models.purchases import NewPurchase, PurchaseRecord
from src.domain.repositories.purchases import PurchaseRepository
from src.infrastructure.persistence.models.purchases import CryptoPurchase as OrmPurchase

logger = logging.getLogger(__name__)


def _to_domain(row: OrmPurchase) -> PurchaseRecord:
    return PurchaseRecord(
        id=row.id,
        symbol=row.symbol,
        purchase_timestamp=row.purchase_date,
        amount=row.amount,
        purchase_price_usd=row.purchase_price_usd,
        created_at=row.created_at,
    )


class SqlPurchaseRepository(PurchaseRepository):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as exc:
            logger.error("Record store failed to %s: %s", action, exc)
            raise StoreFailure(f"Failed to {action}: {exc}") from exc

    async def get_by_id(self, purchase_id: UUID) -> PurchaseRecord | None:
        async with self._transaction("load purchase") as session:
            row = await session.get(OrmPurchase, purchase_id)
            return _to_domain(row) if row else None

    async def list_all(self) -> list[PurchaseRecord]:
        stmt = select(OrmPurchase).order_by(OrmPurchase.purchase_date.desc())
        async with self._transaction("load purchases") as session:
            result = await session.execute(stmt)
            return [_to_domain(row) for row in result.scalars()]

    async def list(self, limit: int = 50, offset: int = 0) -> list[PurchaseRecord]:
        stmt = (
            select(OrmPurchase)
            .order_by(OrmPurchase.purchase_date.desc())
            .limit(limit)
            .offset(offset)
        )
        async with self._transaction("load purchases") as session:
            result = await session.execute(stmt)
            return [_to_domain(row) for row in result.scalars()]

    async def create(self, entity: NewPurchase) -> PurchaseRecord:
        record = PurchaseRecord.from_new(entity)
        row = OrmPurchase(
            id=record.id,
            symbol=record.symbol,
            purchase_date=record.purchase_timestamp,
            amount=record.amount,
            purchase_price_usd=record.purchase_price_usd,
            created_at=record.created_at,
            updated_at=record.created_at,
        )
        async with self._transaction("add purchase") as session:
            session.add(row)
        return record

    async def update(self, entity: PurchaseRecord) -> PurchaseRecord:
        raise NotImplementedError("Purchase records are immutable")

    async def delete(self, id: UUID) -> None:
        stmt = delete(OrmPurchase).where(OrmPurchase.id == id)
        async with self._transaction("delete purchase") as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise StoreFailure(f"Purchase {id} not found")
