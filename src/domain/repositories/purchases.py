"""Purchase repository interface."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from src.domain.models.purchases import NewPurchase, PurchaseRecord

from .base import Repository


class PurchaseRepository(Repository[PurchaseRecord]):
    """Read/write interface for PurchaseRecord entities.

    Records are immutable after creation (no update in the domain).
    Deleting an id that does not exist is a StoreFailure, not a no-op.
    """

    async def get(self, id: UUID) -> PurchaseRecord | None:
        return await self.get_by_id(id)

    @abstractmethod
    async def get_by_id(self, purchase_id: UUID) -> PurchaseRecord | None:
        """Return the record, or None."""

    @abstractmethod
    async def list_all(self) -> list[PurchaseRecord]:
        """Return every record ordered by purchase_timestamp descending."""

    @abstractmethod
    async def list(self, limit: int = 50, offset: int = 0) -> list[PurchaseRecord]:
        """Return a page of records ordered by purchase_timestamp descending."""

    @abstractmethod
    async def create(self, entity: NewPurchase) -> PurchaseRecord:
        """Persist a new purchase and return the stored record."""

    @abstractmethod
    async def delete(self, id: UUID) -> None:
        """Remove the record, raising StoreFailure if it cannot be removed."""
