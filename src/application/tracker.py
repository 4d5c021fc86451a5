"""Composition root: wires the registry, oracle, store, engine and workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncEngine

from src.application.forms import PurchaseForm
from src.application.refresh import RefreshScheduler
from src.application.workflows import AddPurchaseWorkflow, ConfirmDelete, DeletePurchaseWorkflow
from src.domain.models.purchases import PurchaseRecord
from src.domain.models.valuation import PortfolioView
from src.domain.oracles.base import PriceOracle
from src.domain.services.symbols import SymbolRegistry
from src.domain.services.valuation import ValuationEngine
from src.infrastructure.config import Settings, configure_logging, settings
from src.infrastructure.database import build_engine, build_session_factory
from src.infrastructure.persistence.repositories import get_repositories
from src.infrastructure.pricing.coingecko import CoinGeckoPriceOracle

logger = logging.getLogger(__name__)


@dataclass
class PortfolioTracker:
    registry: SymbolRegistry
    oracle: PriceOracle
    refresher: RefreshScheduler
    add_workflow: AddPurchaseWorkflow
    delete_workflow: DeletePurchaseWorkflow
    db_engine: AsyncEngine | None = None

    @property
    def view(self) -> PortfolioView:
        return self.refresher.view

    def new_form(self) -> PurchaseForm:
        return PurchaseForm(registry=self.registry)

    async def start(self) -> PortfolioView:
        """Load and value the portfolio, then start interval refreshes."""
        view = await self.refresher.reload()
        self.refresher.start()
        return view

    async def add_purchase(self, form: PurchaseForm) -> PurchaseRecord:
        return await self.add_workflow.submit(form)

    async def delete_purchase(self, record_id: UUID, confirm: ConfirmDelete) -> bool:
        return await self.delete_workflow.delete(record_id, confirm)

    async def close(self) -> None:
        self.refresher.shutdown()
        await self.oracle.aclose()
        if self.db_engine is not None:
            await self.db_engine.dispose()


def build_tracker(config: Settings | None = None) -> PortfolioTracker:
    """Build a tracker backed by SQLAlchemy and CoinGecko from settings."""
    config = config or settings
    configure_logging(config.log_level)

    registry = SymbolRegistry()
    oracle = CoinGeckoPriceOracle(
        registry,
        base_url=config.coingecko_base_url,
        timeout=config.price_timeout_seconds,
        api_key=config.coingecko_api_key,
    )
    db_engine = build_engine(config.database_url)
    repos = get_repositories(build_session_factory(db_engine))

    refresher = RefreshScheduler(
        repos.purchases,
        ValuationEngine(oracle),
        interval_seconds=config.refresh_interval_seconds,
    )

    add_workflow = AddPurchaseWorkflow(
        registry, oracle, repos.purchases, on_added=refresher.record_added
    )
    delete_workflow = DeletePurchaseWorkflow(
        repos.purchases, on_deleted=refresher.remove_record
    )
    logger.info("Portfolio tracker configured (refresh every %gs)", config.refresh_interval_seconds)
    return PortfolioTracker(
        registry=registry,
        oracle=oracle,
        refresher=refresher,
        add_workflow=add_workflow,
        delete_workflow=delete_workflow,
        db_engine=db_engine,
    )
