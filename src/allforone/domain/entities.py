"""Domain entities: payment events, distribution cycles and payouts."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PaymentKind(BaseModel):
    """Transaction type/subtype pair that means "plain value transfer" on a chain."""

    model_config = ConfigDict(frozen=True)

    type: int
    subtype: int


class PaymentEvent(BaseModel):
    """An executed transaction as reported by the ledger node.

    Field aliases follow the node's JSON so a raw transaction object can be
    validated directly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    sender: str
    sender_rs: Optional[str] = Field(None, alias="senderRS")
    recipient: str
    recipient_rs: Optional[str] = Field(None, alias="recipientRS")
    amount_nqt: int = Field(..., ge=0, alias="amountNQT")
    chain: int
    type: int
    subtype: int
    height: int = Field(..., ge=0)
    full_hash: Optional[str] = Field(None, alias="fullHash")

    @property
    def kind(self) -> PaymentKind:
        return PaymentKind(type=self.type, subtype=self.subtype)

    def sent_by(self, account: str) -> bool:
        return account in (self.sender, self.sender_rs)

    def addressed_to(self, account: str) -> bool:
        return account in (self.recipient, self.recipient_rs)


class DistributionCycle(BaseModel):
    """The window of heights a single trigger aggregates.

    The window is half-open: payments included at ``window_start_height``
    belong to the previous cycle, payments at ``window_end_height`` to this one.
    """

    model_config = ConfigDict(frozen=True)

    chain: int
    account: str
    frequency: int = Field(..., gt=0)
    trigger_height: int
    window_start_height: int
    window_end_height: int

    @model_validator(mode="after")
    def _check_window(self) -> "DistributionCycle":
        if self.window_start_height > self.window_end_height:
            raise ValueError("Window start height must not exceed its end height")
        return self

    @classmethod
    def for_trigger(
        cls,
        *,
        chain: int,
        account: str,
        frequency: int,
        trigger_height: int,
        minimum_ledger_height: int,
        last_distributed_height: Optional[int] = None,
    ) -> "DistributionCycle":
        """Derive the cycle a trigger at ``trigger_height`` covers."""
        if last_distributed_height is not None:
            start = max(last_distributed_height, minimum_ledger_height)
        else:
            start = max(trigger_height - frequency, minimum_ledger_height)
        return cls(
            chain=chain,
            account=account,
            frequency=frequency,
            trigger_height=trigger_height,
            window_start_height=min(start, trigger_height),
            window_end_height=trigger_height,
        )

    def contains(self, height: int) -> bool:
        return self.window_start_height < height <= self.window_end_height


def next_trigger_height(current_height: int, frequency: int) -> int:
    """Return the first height strictly above ``current_height`` that triggers."""
    if frequency <= 0:
        raise ValueError("Frequency must be a positive number of blocks")
    return (current_height // frequency + 1) * frequency


def is_trigger_height(height: int, frequency: int) -> bool:
    if frequency <= 0:
        raise ValueError("Frequency must be a positive number of blocks")
    return height % frequency == 0


class PayoutIntent(BaseModel):
    """A payout ready to be submitted: the whole pot minus the fee."""

    model_config = ConfigDict(frozen=True)

    chain: int
    recipient: str
    gross_amount_nqt: int = Field(..., gt=0)
    fee_nqt: int = Field(..., gt=0)

    @model_validator(mode="after")
    def _check_fee(self) -> "PayoutIntent":
        if self.fee_nqt >= self.gross_amount_nqt:
            raise ValueError("Fee must be lower than the gross payout amount")
        return self

    @property
    def net_amount_nqt(self) -> int:
        return self.gross_amount_nqt - self.fee_nqt


class SubmissionReceipt(BaseModel):
    """What the ledger returns after accepting a payout transaction."""

    full_hash: str = Field(..., alias="fullHash")
    broadcasted: bool = True

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


CycleStatus = Literal["skipped", "empty", "distributed"]


class CycleOutcome(BaseModel):
    """Result of handling one block."""

    status: CycleStatus
    height: int
    reason: Optional[str] = None
    cycle: Optional[DistributionCycle] = None
    payout: Optional[PayoutIntent] = None
    receipt: Optional[SubmissionReceipt] = None
    payment_count: int = 0
