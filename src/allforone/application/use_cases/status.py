"""Read-only view of the pot waiting for the next distribution."""

from __future__ import annotations

from ...domain.entities import DistributionCycle, next_trigger_height
from ...domain.errors import CollectionError, LedgerRequestError
from ...domain.shared import LedgerClientProtocol
from ...domain.watermark_repository import WatermarkRepository
from ..dtos import PendingPaymentDTO, StatusResponseDTO
from .collector import PaymentWindowCollector


class StatusReporter:
    """Reports the payments the next triggering block would distribute."""

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
    ):
        self.ledger_client = ledger_client
        self.collector = collector
        self.watermark_repository = watermark_repository
        self.chain = chain
        self.account = account
        self.frequency = frequency
        self.minimum_ledger_height = minimum_ledger_height

    async def get_status(self) -> StatusResponseDTO:
        """Report the pending pot as of the node's current height."""
        try:
            current_height = await self.ledger_client.get_current_height()
        except LedgerRequestError as e:
            raise CollectionError(f"Cannot read current height: {e}") from e
        return await self.report(
            self.chain, self.account, self.frequency, current_height
        )

    async def report(
        self, chain: int, account: str, frequency: int, current_height: int
    ) -> StatusResponseDTO:
        """Report the payments pending for the next trigger after ``current_height``.

        Uses the same window rule and the same collector as the distribution
        itself, so the result matches what the next cycle will pay out.
        """
        last = await self.watermark_repository.get_last_distributed_height(
            chain, account
        )
        cycle = DistributionCycle.for_trigger(
            chain=chain,
            account=account,
            frequency=frequency,
            trigger_height=next_trigger_height(current_height, frequency),
            minimum_ledger_height=self.minimum_ledger_height,
            last_distributed_height=last,
        )
        payments = await self.collector.collect(
            chain,
            cycle.window_start_height,
            account,
            cycle.window_end_height,
        )
        return StatusResponseDTO(
            pending_amount_nqt=sum(p.amount_nqt for p in payments),
            payments=[
                PendingPaymentDTO(
                    sender_rs=p.sender_rs or p.sender, amount_nqt=p.amount_nqt
                )
                for p in payments
            ],
        )
