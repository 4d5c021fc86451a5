"""Add-purchase and delete-purchase workflows.

AddPurchaseWorkflow.add checks, in order, stopping at the first failure:

    1. symbol is in the registry              → InvalidSymbol
    2. date, time, amount parse; the combined
       local timestamp is not in the future   → InvalidPurchaseInput
    3. oracle historical price                → PriceUnavailable
    4. record store create                    → StoreFailure

Nothing is persisted unless every earlier step succeeded, so a failure never
leaves partial state behind.
"""

from __future__ import annotations

import inspect
import logging
import math
from collections.abc import Awaitable, Callable
from datetime import date, datetime, time, timezone, tzinfo
from uuid import UUID

from src.application.forms import PurchaseForm
from src.domain.errors import InvalidPurchaseInput, InvalidSymbol, StoreFailure, TrackerError
from src.domain.models.purchases import NewPurchase, PurchaseRecord
from src.domain.oracles.base import PriceOracle
from src.domain.repositories.purchases import PurchaseRepository
from src.domain.services.symbols import SymbolRegistry

logger = logging.getLogger(__name__)

PurchaseAddedHook = Callable[[PurchaseRecord], Awaitable[None]]
PurchaseDeletedHook = Callable[[UUID], None]
ConfirmDelete = Callable[[UUID], bool | Awaitable[bool]]


def _parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidPurchaseInput(f"Invalid purchase date: {value!r}") from exc


def _parse_time(value: str | time) -> time:
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidPurchaseInput(f"Invalid purchase time: {value!r}") from exc


def _parse_amount(value: str | float) -> float:
    try:
        amount = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError) as exc:
        raise InvalidPurchaseInput(f"Invalid amount: {value!r}") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidPurchaseInput(f"Amount must be a positive number, got {value!r}")
    return amount


class AddPurchaseWorkflow:
    """Validate a purchase, price it at its date, and persist it.

    tz is the zone used to interpret the entered date and time; None means
    the process's local zone.
    """

    def __init__(
        self,
        registry: SymbolRegistry,
        oracle: PriceOracle,
        repository: PurchaseRepository,
        on_added: PurchaseAddedHook | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._registry = registry
        self._oracle = oracle
        self._repository = repository
        self._on_added = on_added
        self._tz = tz

    def combine_timestamp(self, purchase_date: date, purchase_time: time) -> datetime:
        if self._tz is not None:
            return datetime.combine(purchase_date, purchase_time, tzinfo=self._tz)
        return datetime.combine(purchase_date, purchase_time).astimezone()

    async def add(
        self,
        symbol: str,
        purchase_date: str | date,
        purchase_time: str | time,
        amount: str | float,
    ) -> PurchaseRecord:
        symbol = symbol.strip()
        if not self._registry.is_supported(symbol):
            raise InvalidSymbol(symbol)
        symbol = symbol.upper()

        timestamp = self.combine_timestamp(_parse_date(purchase_date), _parse_time(purchase_time))
        if timestamp > datetime.now(timezone.utc):
            raise InvalidPurchaseInput(
                f"Purchase time {timestamp.isoformat()} is in the future"
            )
        units = _parse_amount(amount)

        price = await self._oracle.fetch_historical_price(symbol, timestamp)

        purchase = NewPurchase(
            symbol=symbol,
            purchase_timestamp=timestamp,
            amount=units,
            purchase_price_usd=price,
        )
        record = await self._repository.create(purchase)
        logger.info(
            "Recorded purchase %s: %s %s @ %.2f USD",
            record.id, record.amount, record.symbol, price,
        )
        return record

    async def submit(self, form: PurchaseForm) -> PurchaseRecord:
        """Run add() from form fields, reporting failures inline on the form.

        On success the form is cleared and the on_added hook is awaited.
        Failures are stored in form.error and re-raised unchanged.
        """
        form.error = None
        form.submitting = True
        try:
            record = await self.add(
                form.symbol, form.purchase_date, form.purchase_time, form.amount
            )
        except TrackerError as exc:
            form.error = str(exc)
            raise
        finally:
            form.submitting = False

        form.reset()
        if self._on_added is not None:
            await self._on_added(record)
        return record


class DeletePurchaseWorkflow:
    """Confirmed deletion of a single purchase record."""

    def __init__(
        self,
        repository: PurchaseRepository,
        on_deleted: PurchaseDeletedHook | None = None,
    ) -> None:
        self._repository = repository
        self._on_deleted = on_deleted

    async def delete(self, record_id: UUID, confirm: ConfirmDelete) -> bool:
        """Delete record_id once confirm() agrees.

        Returns False without touching the store when confirmation is
        declined.  StoreFailure propagates and leaves displayed state as it
        was; the caller is expected to surface it as an alert.
        """
        answer = confirm(record_id)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.debug("Deletion of %s cancelled", record_id)
            return False

        try:
            await self._repository.delete(record_id)
        except StoreFailure:
            logger.error("Failed to delete purchase %s", record_id)
            raise

        if self._on_deleted is not None:
            self._on_deleted(record_id)
        return True
