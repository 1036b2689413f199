"""Watermark repository implementation over a storage abstraction."""

from __future__ import annotations

from typing import Optional

from ..domain.watermark_repository import WatermarkRepository
from .storage import KeyValueStore


class WatermarkRepositoryImpl(WatermarkRepository):
    """Watermark repository using a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def _key(chain: int, account: str) -> str:
        return f"watermark:{chain}:{account}"

    async def get_last_distributed_height(
        self, chain: int, account: str
    ) -> Optional[int]:
        data = await self.store.get(self._key(chain, account))
        if data is None:
            return None
        return int(data)

    async def set_last_distributed_height(
        self, chain: int, account: str, height: int
    ) -> None:
        await self.store.set(self._key(chain, account), str(height))
