"""Tests for the block poller."""

from __future__ import annotations

import asyncio

import pytest

from allforone.application.use_cases.collector import PaymentWindowCollector
from allforone.application.use_cases.redistribution import RedistributionService
from allforone.domain.errors import LedgerRequestError
from allforone.infrastructure.block_poller import BlockPoller
from tests.fixtures import InMemoryWatermarkRepository, TestLedgerClient, make_payment


async def test_first_poll_only_records_height(
    ledger: TestLedgerClient, redistribution_service: RedistributionService
) -> None:
    ledger.height = 15
    poller = BlockPoller(ledger, redistribution_service, interval=1.0)

    assert await poller.poll_once() == []
    assert poller.last_height == 15


async def test_delivers_every_new_height_in_order(
    ledger: TestLedgerClient, redistribution_service: RedistributionService
) -> None:
    ledger.height = 7
    poller = BlockPoller(ledger, redistribution_service, interval=1.0)
    await poller.poll_once()
    ledger.add_transaction(make_payment("A", 5_000, height=8))

    ledger.height = 12
    outcomes = await poller.poll_once()

    assert [o.height for o in outcomes] == [8, 9, 10, 11, 12]
    assert [o.status for o in outcomes] == [
        "skipped",
        "skipped",
        "distributed",
        "skipped",
        "skipped",
    ]
    assert poller.last_height == 12


async def test_failed_cycle_does_not_stop_polling(
    ledger: TestLedgerClient, redistribution_service: RedistributionService
) -> None:
    ledger.height = 9
    poller = BlockPoller(ledger, redistribution_service, interval=1.0)
    await poller.poll_once()
    ledger.set_error("query_transactions", LedgerRequestError("x", "down"))

    ledger.height = 11
    outcomes = await poller.poll_once()

    assert [o.height for o in outcomes] == [11]
    assert poller.last_height == 11


async def test_height_read_failure_is_retried_later(
    ledger: TestLedgerClient, redistribution_service: RedistributionService
) -> None:
    ledger.height = 3
    poller = BlockPoller(ledger, redistribution_service, interval=1.0)
    await poller.poll_once()
    ledger.set_error("get_current_height", LedgerRequestError("x", "down"))

    assert await poller.poll_once() == []
    assert poller.last_height == 3


class _FailingWatermarks(InMemoryWatermarkRepository):
    async def get_last_distributed_height(self, chain: int, account: str):
        raise ConnectionError("redis down")


async def test_storage_failure_does_not_stop_polling(
    ledger: TestLedgerClient, collector: PaymentWindowCollector
) -> None:
    service = RedistributionService(
        ledger, collector, _FailingWatermarks(), chain=2, account="ACC", frequency=10
    )
    ledger.height = 9
    poller = BlockPoller(ledger, service, interval=1.0)
    await poller.poll_once()

    ledger.height = 11
    outcomes = await poller.poll_once()

    assert [o.height for o in outcomes] == [11]
    assert poller.last_height == 11


async def test_run_keeps_polling_after_unexpected_error(
    ledger: TestLedgerClient, redistribution_service: RedistributionService
) -> None:
    poller = BlockPoller(ledger, redistribution_service, interval=0.01)
    calls = 0
    original = poller.poll_once

    async def flaky_poll() -> list:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise ConnectionError("redis down")
        return await original()

    poller.poll_once = flaky_poll  # type: ignore[method-assign]
    task = asyncio.create_task(poller.run())
    try:
        for _ in range(100):
            if calls >= 3:
                break
            await asyncio.sleep(0.01)
    finally:
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert calls >= 3
