from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Type
from types import TracebackType

import httpx
from pydantic import ValidationError

from ...domain.entities import PaymentEvent, PaymentKind, SubmissionReceipt
from ...domain.errors import LedgerRequestError
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)


class AsyncLedgerClient:
    """Asynchronous client for an Ardor-style ledger node.

    Satisfies ``LedgerClientProtocol``. Payouts are signed by the node with
    the configured secret phrase; nothing is signed locally.
    """

    def __init__(
        self,
        base_url: str,
        secret_phrase: str,
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = AsyncHttpClient(base_url, timeout=timeout, transport=transport)
        self._secret_phrase = secret_phrase

    async def get_current_height(self) -> int:
        body = await self._http.get("getBlockchainStatus")
        return _require_int(body, "numberOfBlocks", "getBlockchainStatus") - 1

    async def resolve_height_timestamp(self, height: int) -> int:
        body = await self._http.get("getBlock", height=height)
        return _require_int(body, "timestamp", "getBlock")

    async def query_transactions(
        self,
        chain: int,
        account: str,
        since_timestamp: int,
        kind: PaymentKind,
        *,
        executed_only: bool = True,
    ) -> list[PaymentEvent]:
        body = await self._http.get(
            "getBlockchainTransactions",
            chain=chain,
            account=account,
            timestamp=since_timestamp,
            type=kind.type,
            subtype=kind.subtype,
            executedOnly=executed_only,
        )
        transactions = body.get("transactions")
        if not isinstance(transactions, list):
            raise LedgerRequestError(
                "getBlockchainTransactions", "missing 'transactions' array"
            )
        try:
            return [PaymentEvent.model_validate(tx) for tx in transactions]
        except ValidationError as e:
            raise LedgerRequestError(
                "getBlockchainTransactions", f"malformed transaction: {e}"
            ) from e

    async def estimate_fee(self, chain: int, recipient: str, amount_nqt: int) -> int:
        # feeNQT=-1 asks the node to compute the minimum fee without broadcasting.
        body = await self._http.post(
            "sendMoney",
            chain=chain,
            recipient=recipient,
            amountNQT=amount_nqt,
            feeNQT=-1,
            secretPhrase=self._secret_phrase,
            broadcast=False,
        )
        fee = body.get("minimumFeeFQT")
        if fee is None:
            tx = body.get("transactionJSON")
            fee = tx.get("feeNQT") if isinstance(tx, Mapping) else None
        if fee is None:
            return 0
        try:
            return int(fee)
        except (TypeError, ValueError) as e:
            raise LedgerRequestError("sendMoney", f"malformed fee {fee!r}") from e

    async def submit_transfer(
        self, chain: int, recipient: str, amount_nqt: int, fee_nqt: int
    ) -> SubmissionReceipt:
        body = await self._http.post(
            "sendMoney",
            chain=chain,
            recipient=recipient,
            amountNQT=amount_nqt,
            feeNQT=fee_nqt,
            secretPhrase=self._secret_phrase,
            broadcast=True,
        )
        try:
            receipt = SubmissionReceipt.model_validate(body)
        except ValidationError as e:
            raise LedgerRequestError("sendMoney", f"malformed receipt: {e}") from e
        if body.get("broadcasted") is False:
            raise LedgerRequestError("sendMoney", "transaction was not broadcasted")
        logger.debug("Broadcasted transaction %s", receipt.full_hash)
        return receipt

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncLedgerClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


def _require_int(body: Mapping[str, Any], field: str, request_type: str) -> int:
    value = body.get(field)
    if isinstance(value, bool) or value is None:
        raise LedgerRequestError(request_type, f"missing '{field}'")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise LedgerRequestError(request_type, f"malformed '{field}'") from e
