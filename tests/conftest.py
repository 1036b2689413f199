"""Shared pytest fixtures for redistribution tests."""

from __future__ import annotations

import os
import random
from typing import AsyncGenerator, Iterator

import pytest
import pytest_asyncio

from allforone.application.use_cases.collector import PaymentWindowCollector
from allforone.application.use_cases.redistribution import RedistributionService
from allforone.application.use_cases.status import StatusReporter
from allforone.infrastructure.database import DatabaseClient
from allforone.infrastructure.storage import RedisKeyValueStore
from tests.fixtures import InMemoryWatermarkRepository, TestLedgerClient

CHAIN = 2
ACCOUNT = "ACC"
FREQUENCY = 10


@pytest.fixture
def ledger() -> TestLedgerClient:
    """Create an in-memory ledger at height 0."""
    return TestLedgerClient()


@pytest.fixture
def watermark_repository() -> Iterator[InMemoryWatermarkRepository]:
    repo = InMemoryWatermarkRepository()
    yield repo
    repo.clear()


@pytest.fixture
def collector(ledger: TestLedgerClient) -> PaymentWindowCollector:
    return PaymentWindowCollector(ledger)


@pytest.fixture
def redistribution_service(
    ledger: TestLedgerClient,
    collector: PaymentWindowCollector,
    watermark_repository: InMemoryWatermarkRepository,
) -> RedistributionService:
    """Service for chain 2 distributing every 10 blocks, with a seeded RNG."""
    return RedistributionService(
        ledger,
        collector,
        watermark_repository,
        chain=CHAIN,
        account=ACCOUNT,
        frequency=FREQUENCY,
        rng=random.Random(1234),
    )


@pytest.fixture
def status_reporter(
    ledger: TestLedgerClient,
    collector: PaymentWindowCollector,
    watermark_repository: InMemoryWatermarkRepository,
) -> StatusReporter:
    return StatusReporter(
        ledger,
        collector,
        watermark_repository,
        chain=CHAIN,
        account=ACCOUNT,
        frequency=FREQUENCY,
    )


class TestDatabaseSettings:
    """Test settings for Redis connection."""

    __test__ = False

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url


@pytest_asyncio.fixture
async def redis_store() -> AsyncGenerator[RedisKeyValueStore, None]:
    """Create a Redis-backed key-value store for testing.

    Uses database 15 by default, or TEST_REDIS_URL if set. Tests using this
    fixture are skipped when Redis is not reachable.
    """
    test_redis_url = os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")
    client = DatabaseClient(TestDatabaseSettings(database_url=test_redis_url))
    client.initialize_database()

    try:
        async with client.get_connection() as conn:
            await conn.ping()
    except Exception as e:
        await client.close()
        pytest.skip(f"Redis not available at {test_redis_url}: {e}")

    yield RedisKeyValueStore(client)

    async with client.get_connection() as conn:
        await conn.flushdb()
    await client.close()
