"""Unit tests for the chain payment-kind table."""

from allforone.domain.entities import PaymentKind
from allforone.domain.payment_kinds import PaymentKindTable


class TestPaymentKindTable:
    def test_parent_chain_default(self) -> None:
        table = PaymentKindTable()
        assert table.kind_for(1) == PaymentKind(type=-2, subtype=0)

    def test_child_chain_default(self) -> None:
        table = PaymentKindTable()
        assert table.kind_for(2) == PaymentKind(type=0, subtype=0)
        assert table.kind_for(5) == PaymentKind(type=0, subtype=0)

    def test_override(self) -> None:
        table = PaymentKindTable({3: PaymentKind(type=7, subtype=1)})
        assert table.kind_for(3) == PaymentKind(type=7, subtype=1)
        assert table.kind_for(1) == PaymentKind(type=-2, subtype=0)

    def test_is_payment(self) -> None:
        table = PaymentKindTable()
        assert table.is_payment(1, PaymentKind(type=-2, subtype=0))
        assert not table.is_payment(1, PaymentKind(type=0, subtype=0))
        assert not table.is_payment(2, PaymentKind(type=0, subtype=1))
