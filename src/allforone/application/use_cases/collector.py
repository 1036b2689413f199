"""Collection of the incoming payments that make up a distribution window."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.entities import PaymentEvent
from ...domain.errors import CollectionError, LedgerRequestError
from ...domain.payment_kinds import PaymentKindTable
from ...domain.shared import LedgerClientProtocol

logger = logging.getLogger(__name__)


class PaymentWindowCollector:
    """Reads and filters the payments a monitored account received in a window."""

    def __init__(
        self,
        ledger_client: LedgerClientProtocol,
        payment_kinds: Optional[PaymentKindTable] = None,
    ):
        self.ledger_client = ledger_client
        self.payment_kinds = payment_kinds or PaymentKindTable()

    async def collect(
        self,
        chain: int,
        window_start_height: int,
        account: str,
        window_end_height: Optional[int] = None,
    ) -> list[PaymentEvent]:
        """Return the qualifying payments in ``(window_start_height, window_end_height]``.

        Raises:
            CollectionError: if the ledger cannot be read. Nothing is returned
                in that case, not even the events already received.
        """
        kind = self.payment_kinds.kind_for(chain)
        try:
            since = await self.ledger_client.resolve_height_timestamp(
                window_start_height
            )
            transactions = await self.ledger_client.query_transactions(
                chain, account, since, kind, executed_only=True
            )
        except LedgerRequestError as e:
            raise CollectionError(
                f"Could not load payments to {account} on chain {chain} "
                f"since height {window_start_height}: {e}"
            ) from e

        payments = [
            tx
            for tx in transactions
            if self._qualifies(tx, chain, account, window_start_height, window_end_height)
        ]
        logger.info(
            "Collected %d of %d transactions to %s on chain %d since height %d",
            len(payments),
            len(transactions),
            account,
            chain,
            window_start_height,
        )
        return payments

    def _qualifies(
        self,
        tx: PaymentEvent,
        chain: int,
        account: str,
        window_start_height: int,
        window_end_height: Optional[int],
    ) -> bool:
        if tx.chain != chain:
            return False
        if not self.payment_kinds.is_payment(chain, tx.kind):
            return False
        if not tx.addressed_to(account):
            return False
        if tx.sent_by(account):
            return False
        if tx.height <= window_start_height:
            return False
        if window_end_height is not None and tx.height > window_end_height:
            return False
        return True
