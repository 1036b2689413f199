"""Watermark repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class WatermarkRepository(ABC):
    """Abstract store of the last height a payout was submitted for."""

    @abstractmethod
    async def get_last_distributed_height(
        self, chain: int, account: str
    ) -> Optional[int]:
        """Return the last distributed height, or None if nothing was paid yet."""
        pass

    @abstractmethod
    async def set_last_distributed_height(
        self, chain: int, account: str, height: int
    ) -> None:
        """Record a confirmed payout at ``height``."""
        pass
