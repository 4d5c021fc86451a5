"""Refresh scheduling for the displayed portfolio.

Two triggers feed the valuation engine:

  reload()          record set changed (initial load, after an add): re-list
                    every record from the store, then run one valuation pass.
  refresh_prices()  interval job, armed only while records exist: value the
                    already-loaded records again; the store is not queried.

The interval job is removed whenever the record set becomes empty and is
recreated whenever the record set changes, so jobs never stack.

Passes may overlap (a reload while an interval pass is in flight).  Each pass
publishes its own complete PortfolioView; a pass that started before a delete
can briefly re-show the deleted record until the next cycle.
"""

from __future__ import annotations

import logging
from uuid import UUID

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.domain.errors import StoreFailure
from src.domain.models.purchases import PurchaseRecord
from src.domain.models.valuation import PortfolioView
from src.domain.repositories.purchases import PurchaseRepository
from src.domain.services.valuation import ValuationEngine

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "portfolio_price_refresh"
DEFAULT_REFRESH_INTERVAL_SECONDS = 30.0


class RefreshScheduler:
    def __init__(
        self,
        repository: PurchaseRepository,
        engine: ValuationEngine,
        scheduler: AsyncIOScheduler | None = None,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    ) -> None:
        self._repository = repository
        self._engine = engine
        self._scheduler = scheduler or AsyncIOScheduler()
        self._interval_seconds = interval_seconds
        self._records: tuple[PurchaseRecord, ...] = ()
        self._view = PortfolioView()
        self.load_error: str | None = None

    @property
    def view(self) -> PortfolioView:
        return self._view

    @property
    def records(self) -> tuple[PurchaseRecord, ...]:
        return self._records

    @property
    def scheduler(self) -> AsyncIOScheduler:
        return self._scheduler

    @property
    def is_armed(self) -> bool:
        return self._scheduler.get_job(REFRESH_JOB_ID) is not None

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Price refresh scheduler started (every %gs)", self._interval_seconds)

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Price refresh scheduler shut down")

    async def reload(self) -> PortfolioView:
        """Re-list records from the store and value them.

        A store failure is recorded in load_error and re-raised; the previous
        records, view, and timer are left untouched.
        """
        try:
            records = await self._repository.list_all()
        except StoreFailure as exc:
            self.load_error = str(exc)
            logger.error("%s", exc)
            raise

        self.load_error = None
        self._set_records(tuple(records))
        self._view = PortfolioView.unpriced(list(self._records))
        if not self._records:
            return self._view
        return await self._run_pass(self._records)

    async def refresh_prices(self) -> PortfolioView:
        """Value the currently loaded records against fresh prices."""
        if not self._records:
            return self._view
        return await self._run_pass(self._records)

    async def record_added(self, record: PurchaseRecord) -> None:
        """Reload after a successful add.

        The record is already stored, so a failed re-list stays in load_error
        and is not reported as a failure of the add.
        """
        try:
            await self.reload()
        except StoreFailure:
            logger.warning("Purchase %s stored but the portfolio could not be reloaded", record.id)

    def remove_record(self, record_id: UUID) -> None:
        """Drop a deleted record from the displayed view without re-listing."""
        self._view = self._view.without(record_id)
        self._set_records(tuple(r for r in self._records if r.id != record_id))

    async def _run_pass(self, records: tuple[PurchaseRecord, ...]) -> PortfolioView:
        view = await self._engine.value(list(records))
        self._view = view
        return view

    def _set_records(self, records: tuple[PurchaseRecord, ...]) -> None:
        self._records = records
        self._rearm()

    def _rearm(self) -> None:
        if self._scheduler.get_job(REFRESH_JOB_ID) is not None:
            self._scheduler.remove_job(REFRESH_JOB_ID)
        if not self._records:
            logger.debug("No purchases loaded; price refresh disarmed")
            return
        self._scheduler.add_job(
            self.refresh_prices,
            trigger=IntervalTrigger(seconds=self._interval_seconds),
            id=REFRESH_JOB_ID,
            replace_existing=True,
        )
        logger.debug(
            "Price refresh armed for %d purchases every %gs",
            len(self._records),
            self._interval_seconds,
        )
