"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.entities import CycleOutcome, CycleStatus


class BlockEventDTO(BaseModel):
    """DTO announcing a newly accepted block."""

    model_config = ConfigDict(json_schema_extra={"example": {"height": 1200}})

    height: int = Field(..., ge=0)


class PendingPaymentDTO(BaseModel):
    """One payment waiting for the next distribution."""

    model_config = ConfigDict(populate_by_name=True)

    sender_rs: str = Field(..., alias="senderRS")
    amount_nqt: int = Field(..., alias="amountNQT")


class StatusResponseDTO(BaseModel):
    """DTO for the pending (not yet distributed) pot."""

    model_config = ConfigDict(populate_by_name=True)

    pending_amount_nqt: int = Field(..., alias="pendingAmountNQT")
    payments: list[PendingPaymentDTO]


class CycleOutcomeResponseDTO(BaseModel):
    """DTO describing what a block did."""

    status: CycleStatus
    height: int
    reason: Optional[str] = None
    window_start_height: Optional[int] = None
    window_end_height: Optional[int] = None
    payment_count: int = 0
    recipient: Optional[str] = None
    gross_amount_nqt: Optional[int] = None
    fee_nqt: Optional[int] = None
    net_amount_nqt: Optional[int] = None
    transaction_full_hash: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: CycleOutcome) -> "CycleOutcomeResponseDTO":
        dto = cls(
            status=outcome.status,
            height=outcome.height,
            reason=outcome.reason,
            payment_count=outcome.payment_count,
        )
        if outcome.cycle is not None:
            dto.window_start_height = outcome.cycle.window_start_height
            dto.window_end_height = outcome.cycle.window_end_height
        if outcome.payout is not None:
            dto.recipient = outcome.payout.recipient
            dto.gross_amount_nqt = outcome.payout.gross_amount_nqt
            dto.fee_nqt = outcome.payout.fee_nqt
            dto.net_amount_nqt = outcome.payout.net_amount_nqt
        if outcome.receipt is not None:
            dto.transaction_full_hash = outcome.receipt.full_hash
        return dto
