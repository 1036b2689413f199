"""Protocol interface for ledger client implementations.

This protocol defines the contract the application layer relies on to read
blocks and transactions and to submit payouts. It enables dependency
injection and lets the services be tested against in-memory fakes.
"""

from __future__ import annotations

from typing import Optional, Protocol, Type, TYPE_CHECKING
from types import TracebackType

if TYPE_CHECKING:
    from ..entities import PaymentEvent, PaymentKind, SubmissionReceipt


class LedgerClientProtocol(Protocol):
    """Protocol defining the interface for ledger node clients.

    Implementations raise ``LedgerRequestError`` for any failure: transport
    errors, timeouts, node-level error codes and malformed responses.
    """

    async def get_current_height(self) -> int:
        """Return the height of the last block the node has accepted."""
        ...

    async def resolve_height_timestamp(self, height: int) -> int:
        """Return the timestamp of the block at ``height``.

        Args:
            height: Block height to resolve
        """
        ...

    async def query_transactions(
        self,
        chain: int,
        account: str,
        since_timestamp: int,
        kind: "PaymentKind",
        *,
        executed_only: bool = True,
    ) -> list["PaymentEvent"]:
        """Return transactions of ``kind`` involving ``account`` since a timestamp.

        Args:
            chain: Chain to query
            account: Account whose transactions are returned
            since_timestamp: Lower bound (inclusive) on transaction timestamps
            kind: Transaction type/subtype to request
            executed_only: Skip transactions the node has not executed
        """
        ...

    async def estimate_fee(self, chain: int, recipient: str, amount_nqt: int) -> int:
        """Return the fee for a transfer; 0 means the node could not compute one."""
        ...

    async def submit_transfer(
        self, chain: int, recipient: str, amount_nqt: int, fee_nqt: int
    ) -> "SubmissionReceipt":
        """Sign and broadcast a transfer of ``amount_nqt`` paying ``fee_nqt``."""
        ...

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        ...

    async def __aenter__(self) -> "LedgerClientProtocol":
        ...

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        ...
