"""Shared in-memory collaborators for unit tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from uuid import UUID

import pytest

from src.domain.errors import PriceUnavailable, StoreFailure
from src.domain.models.purchases import NewPurchase, PurchaseRecord
from src.domain.oracles.base import PriceOracle
from src.domain.repositories.purchases import PurchaseRepository


class FakeOracle(PriceOracle):
    """Price oracle serving fixed prices; symbols missing from a table fail."""

    def __init__(
        self,
        current: dict[str, float] | None = None,
        historical: dict[str, float] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.current = dict(current or {})
        self.historical = dict(historical or {})
        self.delay = delay
        self.current_calls: list[str] = []
        self.historical_calls: list[tuple[str, datetime]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch_current_price(self, symbol: str) -> float:
        self.current_calls.append(symbol)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if symbol not in self.current:
                raise PriceUnavailable(symbol, "not quoted")
            return self.current[symbol]
        finally:
            self.in_flight -= 1

    async def fetch_historical_price(self, symbol: str, timestamp: datetime) -> float:
        self.historical_calls.append((symbol, timestamp))
        if symbol not in self.historical:
            raise PriceUnavailable(symbol, "no history")
        return self.historical[symbol]

    async def aclose(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.current_calls) + len(self.historical_calls)


class InMemoryPurchaseRepository(PurchaseRepository):
    """Dict-backed store; set fail_* flags to simulate store errors."""

    def __init__(self, records: list[PurchaseRecord] | None = None) -> None:
        self.records: dict[UUID, PurchaseRecord] = {r.id: r for r in records or []}
        self.fail_create = False
        self.fail_list = False
        self.fail_delete = False
        self.list_calls = 0
        self.create_calls = 0
        self.delete_calls = 0

    async def get_by_id(self, purchase_id: UUID) -> PurchaseRecord | None:
        return self.records.get(purchase_id)

    async def list_all(self) -> list[PurchaseRecord]:
        self.list_calls += 1
        if self.fail_list:
            raise StoreFailure("Failed to load purchases: connection refused")
        return sorted(self.records.values(), key=lambda r: r.purchase_timestamp, reverse=True)

    async def list(self, limit: int = 50, offset: int = 0) -> list[PurchaseRecord]:
        return (await self.list_all())[offset:offset + limit]

    async def create(self, entity: NewPurchase) -> PurchaseRecord:
        self.create_calls += 1
        if self.fail_create:
            raise StoreFailure("Failed to add purchase: connection refused")
        record = PurchaseRecord.from_new(entity)
        self.records[record.id] = record
        return record

    async def update(self, entity: PurchaseRecord) -> PurchaseRecord:
        raise NotImplementedError

    async def delete(self, id: UUID) -> None:
        self.delete_calls += 1
        if self.fail_delete:
            raise StoreFailure("Failed to delete purchase: connection refused")
        if id not in self.records:
            raise StoreFailure(f"Purchase {id} not found")
        del self.records[id]

    def seed(self, *records: PurchaseRecord) -> None:
        for record in records:
            self.records[record.id] = record

    @property
    def call_count(self) -> int:
        return self.list_calls + self.create_calls + self.delete_calls


def _make_record(
    symbol: str = "BTC",
    amount: float = 1.0,
    purchase_price_usd: float | None = 100.0,
    purchase_timestamp: datetime | None = None,
) -> PurchaseRecord:
    return PurchaseRecord(
        symbol=symbol,
        amount=amount,
        purchase_price_usd=purchase_price_usd,
        purchase_timestamp=purchase_timestamp or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def repository() -> InMemoryPurchaseRepository:
    return InMemoryPurchaseRepository()


@pytest.fixture
def make_record():
    return _make_record
