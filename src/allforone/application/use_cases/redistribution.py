"""Block-triggered redistribution of the collected pot to one payer."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from ...domain.entities import (
    CycleOutcome,
    DistributionCycle,
    PayoutIntent,
    is_trigger_height,
)
from ...domain.errors import (
    FeeEstimationError,
    LedgerRequestError,
    SkipCondition,
    SubmissionError,
)
from ...domain.selection import build_weight_table, select_weighted
from ...domain.shared import LedgerClientProtocol
from ...domain.watermark_repository import WatermarkRepository
from .collector import PaymentWindowCollector

logger = logging.getLogger(__name__)


class RedistributionService:
    """Runs a distribution cycle every ``frequency`` blocks.

    Each triggering block collects the payments received since the last
    payout, picks one payer with odds proportional to what they paid and
    sends them the whole pot minus the transaction fee. The first trigger
    records its window start as the watermark; after that the watermark
    only moves once a payout has been accepted by the ledger.
    """

    def __init__(
        self,
        ledger_client: LedgerClientProtocol,
        collector: PaymentWindowCollector,
        watermark_repository: WatermarkRepository,
        *,
        chain: int,
        account: str,
        frequency: int,
        minimum_ledger_height: int = 2,
        rng: Optional[random.Random] = None,
    ):
        if frequency <= 0:
            raise ValueError("Frequency must be a positive number of blocks")
        self.ledger_client = ledger_client
        self.collector = collector
        self.watermark_repository = watermark_repository
        self.chain = chain
        self.account = account
        self.frequency = frequency
        self.minimum_ledger_height = minimum_ledger_height
        self._rng = rng or random.Random()
        self._lock = asyncio.Lock()

    def _cycle(self, trigger_height: int, last: Optional[int]) -> DistributionCycle:
        return DistributionCycle.for_trigger(
            chain=self.chain,
            account=self.account,
            frequency=self.frequency,
            trigger_height=trigger_height,
            minimum_ledger_height=self.minimum_ledger_height,
            last_distributed_height=last,
        )

    async def on_block(self, height: int) -> CycleOutcome:
        """Handle a new block.

        Returns a ``skipped`` outcome off-trigger, an ``empty`` outcome when
        no one paid in the window, and a ``distributed`` outcome otherwise.

        Raises:
            CollectionError: the window could not be read.
            FeeEstimationError: the fee could not be computed; nothing was sent.
            SubmissionError: the ledger refused the payout; nothing was recorded.
        """
        async with self._lock:
            try:
                cycle = await self._begin(height)
            except SkipCondition as skip:
                logger.debug(str(skip))
                return CycleOutcome(status="skipped", height=height, reason=skip.reason)
            return await self._run(cycle)

    async def _begin(self, height: int) -> DistributionCycle:
        if not is_trigger_height(height, self.frequency):
            raise SkipCondition(height, f"not a multiple of {self.frequency}")
        last = await self.watermark_repository.get_last_distributed_height(
            self.chain, self.account
        )
        if last is not None and height <= last:
            raise SkipCondition(height, f"already distributed up to height {last}")
        cycle = self._cycle(height, last)
        if last is None:
            # First trigger: pin the window start so an aborted cycle is
            # collected again by the next one.
            await self.watermark_repository.set_last_distributed_height(
                cycle.chain, cycle.account, cycle.window_start_height
            )
        return cycle

    async def _run(self, cycle: DistributionCycle) -> CycleOutcome:
        height = cycle.trigger_height
        payments = await self.collector.collect(
            cycle.chain,
            cycle.window_start_height,
            cycle.account,
            cycle.window_end_height,
        )
        if not payments:
            logger.info("No payments to distribute at height %d", height)
            return CycleOutcome(
                status="empty", height=height, reason="no payments", cycle=cycle
            )

        weights = build_weight_table(payments)
        gross = sum(weights.values())
        if gross <= 0:
            logger.info("Only zero-amount payments at height %d", height)
            return CycleOutcome(
                status="empty",
                height=height,
                reason="no payment amount",
                cycle=cycle,
                payment_count=len(payments),
            )

        recipient = select_weighted(weights, self._rng)
        payout = await self._build_payout(cycle.chain, recipient, gross)
        logger.info(
            "Paying %d (fee %d) of %d collected from %d payers to account %s",
            payout.net_amount_nqt,
            payout.fee_nqt,
            gross,
            len(weights),
            recipient,
        )

        try:
            receipt = await self.ledger_client.submit_transfer(
                payout.chain, payout.recipient, payout.net_amount_nqt, payout.fee_nqt
            )
        except LedgerRequestError as e:
            raise SubmissionError(
                f"Payout of {payout.net_amount_nqt} to {recipient} at height "
                f"{height} was not accepted: {e}"
            ) from e

        try:
            await self.watermark_repository.set_last_distributed_height(
                cycle.chain, cycle.account, height
            )
        except Exception:
            logger.exception(
                "Payout %s at height %d was broadcast but the watermark was not saved",
                receipt.full_hash,
                height,
            )
            raise
        return CycleOutcome(
            status="distributed",
            height=height,
            cycle=cycle,
            payout=payout,
            receipt=receipt,
            payment_count=len(payments),
        )

    async def _build_payout(self, chain: int, recipient: str, gross: int) -> PayoutIntent:
        try:
            fee = await self.ledger_client.estimate_fee(chain, recipient, gross)
        except LedgerRequestError as e:
            raise FeeEstimationError(f"Cannot calculate fee: {e}") from e
        if fee is None or fee <= 0:
            raise FeeEstimationError("Cannot calculate fee: ledger returned no fee")
        if fee >= gross:
            raise FeeEstimationError(
                f"Fee {fee} leaves nothing of the {gross} collected to pay out"
            )
        return PayoutIntent(
            chain=chain, recipient=recipient, gross_amount_nqt=gross, fee_nqt=fee
        )
