"""Background delivery of new block heights to the redistribution service."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..application.use_cases.redistribution import RedistributionService
from ..domain.entities import CycleOutcome
from ..domain.errors import DistributionError, LedgerRequestError
from ..domain.shared import LedgerClientProtocol

logger = logging.getLogger(__name__)


class BlockPoller:
    """Polls the node's height and hands every new height to ``on_block`` in order.

    The first poll only records the current height; blocks accepted before
    the poller started are not replayed. A height whose cycle fails is
    logged and not delivered again.
    """

    def __init__(
        self,
        ledger_client: LedgerClientProtocol,
        service: RedistributionService,
        interval: float,
    ) -> None:
        self.ledger_client = ledger_client
        self.service = service
        self.interval = interval
        self.last_height: Optional[int] = None

    async def poll_once(self) -> list[CycleOutcome]:
        try:
            height = await self.ledger_client.get_current_height()
        except LedgerRequestError as e:
            logger.warning("Could not read current height: %s", e)
            return []

        if self.last_height is None:
            self.last_height = height
            logger.info("Block poller starting at height %d", height)
            return []

        outcomes: list[CycleOutcome] = []
        for next_height in range(self.last_height + 1, height + 1):
            try:
                outcomes.append(await self.service.on_block(next_height))
            except DistributionError as e:
                logger.error("Distribution at height %d failed: %s", next_height, e)
            except Exception:
                logger.exception("Unexpected failure handling height %d", next_height)
            self.last_height = next_height
        return outcomes

    async def run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Block poll failed")
            await asyncio.sleep(self.interval)
