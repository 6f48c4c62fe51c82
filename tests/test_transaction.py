"""결제 거래 애그리거트 테스트"""
from datetime import datetime
from decimal import Decimal

import pytest

from domain.entities.records import OrderEntity
from domain.entities.transaction import PaymentTransaction, map_provider_status
from domain.enums import OrderStatus
from domain.exceptions import InvalidStatusTransitionError


def make_order(status=OrderStatus.PENDING, **kwargs):
    defaults = dict(id="o-1", client_external_id="ORD-1", xendit_invoice_id="inv_1",
                    amount=Decimal("50000"), currency="IDR")
    defaults.update(kwargs)
    return OrderEntity(status=status, **defaults)


@pytest.mark.parametrize("raw, expected", [
    ("PAID", OrderStatus.PAID),
    ("succeeded", OrderStatus.PAID),
    ("SUCCESS", OrderStatus.PAID),
    ("SETTLED", OrderStatus.COMPLETED),
    ("EXPIRED", OrderStatus.EXPIRED),
    ("FAILED", OrderStatus.CANCELLED),
    ("CANCELLED", OrderStatus.CANCELLED),
    ("REFUNDED", OrderStatus.REFUNDED),
    ("ACTIVE", OrderStatus.PENDING),
    (None, OrderStatus.PENDING),
])
def test_map_provider_status(raw, expected):
    assert map_provider_status(raw) == expected


def test_pending_to_paid_emits_event():
    paid_at = datetime(2024, 5, 1, 12, 30)
    tx = PaymentTransaction(make_order())

    assert tx.transition_to(OrderStatus.PAID, paid_at=paid_at) is True

    assert tx.status == OrderStatus.PAID
    assert tx.order.paid_at == paid_at
    events = tx.pull_events()
    assert len(events) == 1
    event = events[0]
    assert (event.previous, event.current) == (OrderStatus.PENDING, OrderStatus.PAID)
    assert event.invoice_id == "inv_1"
    assert event.external_id == "ORD-1"
    assert event.paid_at == paid_at
    assert tx.pull_events() == []


def test_paid_without_timestamp_uses_now():
    tx = PaymentTransaction(make_order())
    tx.transition_to(OrderStatus.PAID)
    assert tx.order.paid_at is not None


def test_same_status_is_idempotent():
    tx = PaymentTransaction(make_order(status=OrderStatus.PAID, paid_at=datetime(2024, 1, 1)))
    assert tx.transition_to(OrderStatus.PAID, paid_at=datetime(2024, 2, 2)) is False
    assert tx.order.paid_at == datetime(2024, 1, 1)
    assert tx.pull_events() == []


def test_full_lifecycle():
    tx = PaymentTransaction(make_order())
    tx.transition_to(OrderStatus.PAID)
    tx.transition_to(OrderStatus.COMPLETED)
    tx.transition_to(OrderStatus.REFUNDED)
    assert [e.current for e in tx.pull_events()] == [
        OrderStatus.PAID, OrderStatus.COMPLETED, OrderStatus.REFUNDED]


@pytest.mark.parametrize("current, target", [
    (OrderStatus.PAID, OrderStatus.PENDING),
    (OrderStatus.COMPLETED, OrderStatus.PAID),
    (OrderStatus.EXPIRED, OrderStatus.PAID),
    (OrderStatus.CANCELLED, OrderStatus.COMPLETED),
    (OrderStatus.PENDING, OrderStatus.REFUNDED),
])
def test_illegal_transitions_rejected(current, target):
    tx = PaymentTransaction(make_order(status=current))
    assert not tx.can_transition(target)
    with pytest.raises(InvalidStatusTransitionError):
        tx.transition_to(target)
    assert tx.status == current
    assert tx.pull_events() == []


def test_attach_provider_details_keeps_existing_values():
    tx = PaymentTransaction(make_order(payment_channel="BCA", xendit_invoice_url="https://old"))
    tx.attach_provider_details(invoice_id=None, invoice_url="https://new", payment_channel=None,
                               payer_email="payer@example.com")
    order = tx.order
    assert order.xendit_invoice_id == "inv_1"
    assert order.xendit_invoice_url == "https://new"
    assert order.payment_channel == "BCA"
    assert order.payer_email == "payer@example.com"
