"""Unit tests for the per-engine run guard."""

import pytest

from order_sync_service.services.guard import RunGuard


@pytest.mark.asyncio
async def test_second_acquire_is_refused() -> None:
    guard = RunGuard("test")
    async with guard.acquire() as first:
        async with guard.acquire() as second:
            assert first is True
            assert second is False
        assert guard.running
    assert not guard.running


@pytest.mark.asyncio
async def test_released_on_exception() -> None:
    guard = RunGuard("test")
    with pytest.raises(RuntimeError):
        async with guard.acquire():
            raise RuntimeError("boom")

    async with guard.acquire() as acquired:
        assert acquired is True
