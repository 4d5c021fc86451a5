"""Tests for src/domain/services/valuation.py."""

import pytest

from src.domain.models.valuation import PriceOutcome
from src.domain.services.valuation import ValuationEngine, ValuationService


@pytest.fixture
def service() -> ValuationService:
    return ValuationService()


class TestValuationService:
    def test_distinct_symbols_first_seen_order(self, service, make_record):
        records = [make_record("ETH"), make_record("BTC"), make_record("ETH")]
        assert service.distinct_symbols(records) == ["ETH", "BTC"]

    def test_distinct_symbols_is_exact_string(self, service, make_record):
        records = [make_record("BTC"), make_record("btc")]
        assert service.distinct_symbols(records) == ["BTC", "btc"]

    def test_build_positions_uses_symbol_price(self, service, make_record):
        records = [make_record("BTC", amount=2.0, purchase_price_usd=100.0)]
        positions = service.build_positions(records, {"BTC": PriceOutcome.known("BTC", 150.0)})
        assert positions[0].profit_loss == pytest.approx(100.0)
        assert positions[0].profit_loss_percent == pytest.approx(50.0)

    def test_build_positions_unknown_outcome_is_unpriced(self, service, make_record):
        positions = service.build_positions(
            [make_record("BTC")], {"BTC": PriceOutcome.unknown("BTC")}
        )
        assert positions[0].current_price is None

    def test_build_positions_missing_outcome_is_unpriced(self, service, make_record):
        positions = service.build_positions([make_record("BTC")], {})
        assert positions[0].current_price is None

    def test_summarize(self, service, make_record):
        positions = service.build_positions(
            [make_record("BTC", amount=1.0, purchase_price_usd=40_000.0)],
            {"BTC": PriceOutcome.known("BTC", 50_000.0)},
        )
        snap = service.summarize(positions)
        assert snap.total_profit_loss == pytest.approx(10_000.0)
        assert snap.total_profit_loss_percent == pytest.approx(25.0)


class TestValuationEngine:
    async def test_one_fetch_per_distinct_symbol(self, oracle, make_record):
        oracle.current = {"BTC": 150.0, "ETH": 20.0}
        records = [make_record("BTC"), make_record("ETH"), make_record("BTC")]

        await ValuationEngine(oracle).value(records)

        assert sorted(oracle.current_calls) == ["BTC", "ETH"]

    async def test_fetches_run_concurrently(self, oracle, make_record):
        oracle.current = {"BTC": 1.0, "ETH": 1.0, "SOL": 1.0}
        oracle.delay = 0.01
        records = [make_record("BTC"), make_record("ETH"), make_record("SOL")]

        await ValuationEngine(oracle).value(records)

        assert oracle.max_in_flight == 3

    async def test_failed_symbol_degrades_only_its_positions(self, oracle, make_record):
        oracle.current = {"BTC": 150.0}
        btc = make_record("BTC", amount=2.0, purchase_price_usd=100.0)
        eth = make_record("ETH", amount=10.0, purchase_price_usd=1_000.0)

        view = await ValuationEngine(oracle).value([btc, eth])

        by_symbol = {p.record.symbol: p for p in view.positions}
        assert by_symbol["ETH"].current_price is None
        assert by_symbol["ETH"].profit_loss is None
        assert by_symbol["ETH"].profit_loss_percent is None
        assert by_symbol["BTC"].profit_loss == pytest.approx(100.0)
        assert view.snapshot.total_value == pytest.approx(300.0)
        assert view.snapshot.total_cost == pytest.approx(200.0)

    async def test_all_symbols_failing_still_succeeds(self, oracle, make_record):
        view = await ValuationEngine(oracle).value([make_record("BTC"), make_record("ETH")])
        assert view.snapshot.priced_count == 0
        assert view.snapshot.total_profit_loss_percent == 0

    async def test_unexpected_oracle_error_is_isolated(self, oracle, make_record):
        oracle.current = {"ETH": 2_000.0}
        fetch = oracle.fetch_current_price

        async def flaky(symbol):
            if symbol == "BTC":
                raise RuntimeError("decoder crashed")
            return await fetch(symbol)

        oracle.fetch_current_price = flaky
        view = await ValuationEngine(oracle).value([make_record("BTC"), make_record("ETH")])

        assert view.positions[0].current_price is None
        assert view.positions[1].current_price == 2_000.0
        assert view.snapshot.priced_count == 1

    async def test_preserves_record_order(self, oracle, make_record):
        oracle.current = {"BTC": 1.0, "ETH": 1.0}
        records = [make_record("ETH"), make_record("BTC"), make_record("ETH")]
        view = await ValuationEngine(oracle).value(records)
        assert view.records == records

    async def test_stamps_valued_at(self, oracle, make_record):
        view = await ValuationEngine(oracle).value([make_record()])
        assert view.valued_at is not None

    async def test_empty_records_make_no_calls(self, oracle):
        view = await ValuationEngine(oracle).value([])
        assert view.is_empty
        assert oracle.current_calls == []

    async def test_repeated_passes_are_identical(self, oracle, make_record):
        oracle.current = {"BTC": 150.0, "ETH": 90.0}
        records = [make_record("BTC"), make_record("ETH", purchase_price_usd=100.0)]
        engine = ValuationEngine(oracle)

        first = await engine.value(records)
        second = await engine.value(records)

        assert first.snapshot == second.snapshot
        assert first.positions == second.positions
