"""Chain-specific classification of plain value transfers."""

from __future__ import annotations

from typing import Mapping

from .entities import PaymentKind

# Parent chain payments use their own transaction type; child chains share one.
PARENT_CHAIN_ID = 1
DEFAULT_PAYMENT_KINDS: Mapping[int, PaymentKind] = {
    PARENT_CHAIN_ID: PaymentKind(type=-2, subtype=0),
}
CHILD_CHAIN_PAYMENT_KIND = PaymentKind(type=0, subtype=0)


class PaymentKindTable:
    """Lookup of the payment kind for each chain, with a fallback for chains not listed."""

    def __init__(
        self,
        kinds: Mapping[int, PaymentKind] | None = None,
        default: PaymentKind = CHILD_CHAIN_PAYMENT_KIND,
    ) -> None:
        self._kinds: dict[int, PaymentKind] = dict(DEFAULT_PAYMENT_KINDS)
        if kinds:
            self._kinds.update(kinds)
        self._default = default

    def kind_for(self, chain: int) -> PaymentKind:
        return self._kinds.get(chain, self._default)

    def is_payment(self, chain: int, kind: PaymentKind) -> bool:
        return self.kind_for(chain) == kind
