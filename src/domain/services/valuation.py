"""Portfolio valuation.

Pipeline:
    ValuationEngine.value
        → _fetch_prices          (one concurrent fetch per distinct symbol)
            → _quote             (PriceUnavailable → PriceOutcome.unknown)
        → ValuationService.build_positions
        → PortfolioView.from_positions (snapshot aggregation)

The fan-out is an all-complete barrier: every branch resolves to a
PriceOutcome, so one symbol's failure never cancels or delays the others and
the join itself cannot fail.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from src.domain.errors import PriceUnavailable
from src.domain.models.purchases import PurchaseRecord
from src.domain.models.valuation import (
    PortfolioSnapshot,
    PortfolioView,
    PriceOutcome,
    ValuedPosition,
)
from src.domain.oracles.base import PriceOracle

logger = logging.getLogger(__name__)


class ValuationService:
    """Pure computation over records and already-resolved prices.

    The class is stateless; all inputs are passed per-call.
    """

    def distinct_symbols(self, records: list[PurchaseRecord]) -> list[str]:
        """Unique symbols by exact string, in first-seen order."""
        return list(dict.fromkeys(r.symbol for r in records))

    def build_positions(
        self,
        records: list[PurchaseRecord],
        prices: dict[str, PriceOutcome],
    ) -> list[ValuedPosition]:
        """Value each record against its symbol's outcome, preserving input order."""
        positions = []
        for record in records:
            outcome = prices.get(record.symbol)
            current = outcome.price if outcome is not None and outcome.is_known else None
            positions.append(ValuedPosition.from_record(record, current))
        return positions

    def summarize(self, positions: list[ValuedPosition]) -> PortfolioSnapshot:
        return PortfolioSnapshot.from_positions(positions)


class ValuationEngine:
    """Turn purchase records into a PortfolioView using live oracle prices.

    value() never raises for price problems: a symbol whose fetch fails
    degrades its positions to the unpriced state and the pass carries on.
    """

    def __init__(self, oracle: PriceOracle, service: ValuationService | None = None) -> None:
        self._oracle = oracle
        self._service = service or ValuationService()

    async def value(self, records: list[PurchaseRecord]) -> PortfolioView:
        prices = await self._fetch_prices(self._service.distinct_symbols(records))
        positions = self._service.build_positions(records, prices)
        view = PortfolioView.from_positions(positions, valued_at=datetime.now(timezone.utc))
        logger.debug(
            "Valuation pass: %d positions, %d priced, total P/L %.2f",
            view.snapshot.position_count,
            view.snapshot.priced_count,
            view.snapshot.total_profit_loss,
        )
        return view

    async def _fetch_prices(self, symbols: list[str]) -> dict[str, PriceOutcome]:
        outcomes = await asyncio.gather(*(self._quote(s) for s in symbols))
        return {o.symbol: o for o in outcomes}

    async def _quote(self, symbol: str) -> PriceOutcome:
        try:
            price = await self._oracle.fetch_current_price(symbol)
        except PriceUnavailable as exc:
            logger.warning("Failed to fetch price for %s: %s", symbol, exc.reason)
            return PriceOutcome.unknown(symbol, exc.reason)
        except Exception as exc:
            logger.exception("Unexpected error fetching price for %s", symbol)
            return PriceOutcome.unknown(symbol, str(exc))
        return PriceOutcome.known(symbol, price)
