"""Tests for src/application/refresh.py.

The APScheduler instance is never started except in the lifecycle test, so
interval jobs stay pending and can be inspected without firing.
"""

import asyncio
from datetime import timedelta

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.application.refresh import REFRESH_JOB_ID, RefreshScheduler
from src.domain.errors import StoreFailure
from src.domain.services.valuation import ValuationEngine


@pytest.fixture
def refresher(oracle, repository) -> RefreshScheduler:
    return RefreshScheduler(
        repository, ValuationEngine(oracle), scheduler=AsyncIOScheduler(), interval_seconds=30
    )


class TestReload:
    async def test_lists_and_values_records(self, refresher, oracle, repository, make_record):
        oracle.current = {"BTC": 150.0}
        repository.seed(make_record("BTC", amount=2.0, purchase_price_usd=100.0))

        view = await refresher.reload()

        assert repository.list_calls == 1
        assert view.positions[0].profit_loss == pytest.approx(100.0)
        assert refresher.view is view
        assert refresher.load_error is None

    async def test_arms_interval_job_when_records_exist(self, refresher, repository, make_record):
        repository.seed(make_record())
        await refresher.reload()

        job = refresher.scheduler.get_job(REFRESH_JOB_ID)
        assert job is not None
        assert job.trigger.interval == timedelta(seconds=30)

    async def test_empty_store_leaves_timer_disarmed(self, refresher, oracle):
        view = await refresher.reload()
        assert view.is_empty
        assert not refresher.is_armed
        assert oracle.current_calls == []

    async def test_reload_replaces_job_instead_of_stacking(self, refresher, repository, make_record):
        repository.seed(make_record())
        await refresher.reload()
        repository.seed(make_record("ETH"))
        await refresher.reload()

        assert len(refresher.scheduler.get_jobs()) == 1

    async def test_reload_to_empty_disarms(self, refresher, repository, make_record):
        record = make_record()
        repository.seed(record)
        await refresher.reload()
        repository.records.clear()

        await refresher.reload()

        assert not refresher.is_armed
        assert refresher.view.is_empty

    async def test_store_failure_sets_load_error_and_keeps_state(
        self, refresher, repository, make_record
    ):
        repository.seed(make_record())
        previous = await refresher.reload()
        repository.fail_list = True

        with pytest.raises(StoreFailure):
            await refresher.reload()

        assert "connection refused" in refresher.load_error
        assert refresher.view is previous
        assert refresher.is_armed

    async def test_record_added_keeps_failure_in_load_error(
        self, refresher, repository, make_record
    ):
        record = make_record()
        repository.seed(record)
        repository.fail_list = True

        await refresher.record_added(record)

        assert "connection refused" in refresher.load_error
        assert refresher.view.is_empty

    async def test_record_added_reloads(self, refresher, oracle, repository, make_record):
        oracle.current = {"BTC": 150.0}
        record = make_record()
        repository.seed(record)

        await refresher.record_added(record)

        assert refresher.view.records == [record]
        assert refresher.is_armed

    async def test_successful_reload_clears_load_error(self, refresher, repository):
        repository.fail_list = True
        with pytest.raises(StoreFailure):
            await refresher.reload()
        repository.fail_list = False

        await refresher.reload()

        assert refresher.load_error is None


class TestRefreshPrices:
    async def test_revalues_loaded_records_without_relisting(
        self, refresher, oracle, repository, make_record
    ):
        oracle.current = {"BTC": 150.0}
        repository.seed(make_record("BTC", amount=1.0, purchase_price_usd=100.0))
        await refresher.reload()
        oracle.current["BTC"] = 200.0

        view = await refresher.refresh_prices()

        assert repository.list_calls == 1
        assert view.snapshot.total_profit_loss == pytest.approx(100.0)
        assert refresher.view is view

    async def test_noop_when_nothing_loaded(self, refresher, oracle):
        view = await refresher.refresh_prices()
        assert view.is_empty
        assert oracle.current_calls == []

    async def test_price_outage_degrades_to_unpriced(self, refresher, oracle, repository, make_record):
        oracle.current = {"BTC": 150.0}
        repository.seed(make_record("BTC"))
        await refresher.reload()
        oracle.current.clear()

        view = await refresher.refresh_prices()

        assert view.positions[0].current_price is None
        assert view.snapshot.priced_count == 0


class TestRemoveRecord:
    async def test_removes_from_view_without_relisting(
        self, refresher, oracle, repository, make_record
    ):
        oracle.current = {"BTC": 150.0, "ETH": 10.0}
        btc, eth = make_record("BTC"), make_record("ETH")
        repository.seed(btc, eth)
        await refresher.reload()

        refresher.remove_record(eth.id)

        assert refresher.view.records == [btc]
        assert refresher.records == (btc,)
        assert repository.list_calls == 1
        assert refresher.is_armed

    async def test_removing_last_record_disarms(self, refresher, repository, make_record):
        record = make_record()
        repository.seed(record)
        await refresher.reload()

        refresher.remove_record(record.id)

        assert refresher.view.is_empty
        assert not refresher.is_armed


async def test_start_and_shutdown(refresher):
    refresher.start()
    assert refresher.scheduler.running
    refresher.start()
    refresher.shutdown()
    # AsyncIOScheduler defers shutdown to the next loop iteration
    await asyncio.sleep(0)
    assert not refresher.scheduler.running
