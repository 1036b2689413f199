"""Test fixtures for in-memory implementations."""

from .in_memory_storage import InMemoryKeyValueStore
from .in_memory_repositories import InMemoryWatermarkRepository
from .fake_ledger_client import TestLedgerClient, make_payment

__all__ = [
    "InMemoryKeyValueStore",
    "InMemoryWatermarkRepository",
    "TestLedgerClient",
    "make_payment",
]
