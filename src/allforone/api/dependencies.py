"""Dependencies for the AllForOne API."""

from __future__ import annotations

import random
from functools import lru_cache

from ..application.use_cases.collector import PaymentWindowCollector
from ..application.use_cases.redistribution import RedistributionService
from ..application.use_cases.status import StatusReporter
from ..domain.payment_kinds import PaymentKindTable
from ..env import Settings, get_settings
from ..infrastructure.database import DatabaseClient, get_database_client
from ..infrastructure.ledger.ledger_client import AsyncLedgerClient
from ..infrastructure.storage import RedisKeyValueStore
from ..infrastructure.watermark_repository_impl import WatermarkRepositoryImpl


@lru_cache()
def get_settings_dependency() -> Settings:
    return get_settings()


@lru_cache()
def get_database_client_dependency() -> DatabaseClient:
    settings = get_settings_dependency()
    return get_database_client(settings)


@lru_cache()
def get_watermark_repository() -> WatermarkRepositoryImpl:
    store = RedisKeyValueStore(get_database_client_dependency())
    return WatermarkRepositoryImpl(store)


@lru_cache()
def get_ledger_client() -> AsyncLedgerClient:
    settings = get_settings_dependency()
    return AsyncLedgerClient(
        settings.ledger_base_url,
        settings.secret_phrase.get_secret_value(),
        timeout=settings.ledger_timeout,
    )


@lru_cache()
def get_collector() -> PaymentWindowCollector:
    settings = get_settings_dependency()
    return PaymentWindowCollector(
        get_ledger_client(), PaymentKindTable(settings.payment_kinds)
    )


@lru_cache()
def get_redistribution_service() -> RedistributionService:
    # One instance per process: it owns the random source and the cycle lock.
    settings = get_settings_dependency()
    return RedistributionService(
        get_ledger_client(),
        get_collector(),
        get_watermark_repository(),
        chain=settings.chain,
        account=settings.account,
        frequency=settings.frequency,
        minimum_ledger_height=settings.minimum_ledger_height,
        rng=random.Random(settings.random_seed),
    )


def get_status_reporter() -> StatusReporter:
    settings = get_settings_dependency()
    return StatusReporter(
        get_ledger_client(),
        get_collector(),
        get_watermark_repository(),
        chain=settings.chain,
        account=settings.account,
        frequency=settings.frequency,
        minimum_ledger_height=settings.minimum_ledger_height,
    )
