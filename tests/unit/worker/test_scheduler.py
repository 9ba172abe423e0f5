"""Unit tests for the interval scheduler."""

import asyncio
from datetime import timedelta

import pytest

from order_sync_service.domain.models import RunStatus, StorefrontItem
from sync_worker.scheduler import ORDER_SYNC_JOB, STATUS_PROPAGATION_JOB, Scheduler
from sync_worker.tasks.sync_orders import sync_orders_from_marketplace
from sync_worker.tasks.update_order_status import update_order_status_from_marketplace


@pytest.fixture
def fast_settings(test_settings):
    return test_settings.model_copy(
        update={"order_sync_interval_seconds": 0.05, "status_update_interval_seconds": 0.1}
    )


@pytest.mark.asyncio
async def test_start_registers_interval_jobs(test_settings, order_sync, status_propagation) -> None:
    scheduler = Scheduler(order_sync, status_propagation, test_settings)

    scheduler.start()
    jobs = {job.id: job for job in scheduler.jobs}
    await scheduler.stop()

    assert set(jobs) == {ORDER_SYNC_JOB, STATUS_PROPAGATION_JOB}
    assert jobs[ORDER_SYNC_JOB].trigger.interval == timedelta(seconds=300)
    assert jobs[STATUS_PROPAGATION_JOB].trigger.interval == timedelta(seconds=900)
    assert not scheduler.running


@pytest.mark.asyncio
async def test_both_engines_tick(fast_settings, order_sync, status_propagation, source) -> None:
    scheduler = Scheduler(order_sync, status_propagation, fast_settings)

    scheduler.start()
    assert scheduler.running
    await asyncio.sleep(0.5)
    await scheduler.stop()

    assert not scheduler.running
    labels = [label for _, _, label in source.fetch_calls]
    assert labels.count("today") >= 3


@pytest.mark.asyncio
async def test_failing_tick_is_logged_not_raised(test_settings, order_sync, status_propagation, source) -> None:
    async def failing_fetch(start, end, label):
        source.fetch_calls.append((start, end, label))
        raise RuntimeError("marketplace down")

    source.fetch_orders = failing_fetch
    scheduler = Scheduler(order_sync, status_propagation, test_settings)

    await scheduler.sync_orders()
    await scheduler.sync_orders()

    assert len(source.fetch_calls) == 2
    assert not order_sync.guard.running


@pytest.mark.asyncio
async def test_overlapping_tick_is_dropped_by_guard(test_settings, order_sync, status_propagation, source) -> None:
    release = asyncio.Event()

    async def slow_fetch(start, end, label):
        source.fetch_calls.append((start, end, label))
        await release.wait()
        return []

    source.fetch_orders = slow_fetch
    scheduler = Scheduler(order_sync, status_propagation, test_settings)

    first = asyncio.create_task(scheduler.sync_orders())
    await asyncio.sleep(0)
    await scheduler.sync_orders()
    release.set()
    await first

    assert len(source.fetch_calls) == 1


@pytest.mark.asyncio
async def test_sync_task_returns_summary(order_sync, source, storefront, order_factory) -> None:
    source.orders = [order_factory(order_id="1")]
    storefront.items["SKU-1"] = StorefrontItem(item_id="1", display_name="P")

    summary = await sync_orders_from_marketplace(order_sync)

    assert summary["status"] == RunStatus.OK.value
    assert summary["synced"] == 1


@pytest.mark.asyncio
async def test_status_task_reports_dropped_pass(status_propagation) -> None:
    status_propagation.guard._running = True

    summary = await update_order_status_from_marketplace(status_propagation)

    assert summary == {"window": "today", "skipped": True}
