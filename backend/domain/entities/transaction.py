"""결제 거래 애그리거트

주문(orders)이 결제 상태의 유일한 소유자다. 상태 변경은 이 애그리거트를 통해서만
일어나며, payments 테이블은 여기서 발생한 이벤트로만 갱신되는 투영(projection)이다.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional

from domain.enums import OrderStatus
from domain.entities.records import OrderEntity
from domain.exceptions import InvalidStatusTransitionError


ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    # 일부 채널은 PAID 없이 바로 SETTLED를 보낸다
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.COMPLETED,
                                    OrderStatus.CANCELLED, OrderStatus.EXPIRED}),
    OrderStatus.PAID: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED,
                                 OrderStatus.REFUNDED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.EXPIRED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

PAID_LIKE = frozenset({OrderStatus.PAID, OrderStatus.COMPLETED})


def map_provider_status(raw: Optional[str]) -> OrderStatus:
    """Xendit 상태 문자열 -> 주문 상태"""
    s = (raw or "").strip().upper()
    if s in ("PAID", "SUCCEEDED", "SUCCESS"):
        return OrderStatus.PAID
    if s in ("SETTLED", "COMPLETED"):
        return OrderStatus.COMPLETED
    if s == "EXPIRED":
        return OrderStatus.EXPIRED
    if s in ("CANCELLED", "FAILED"):
        return OrderStatus.CANCELLED
    if s == "REFUNDED":
        return OrderStatus.REFUNDED
    return OrderStatus.PENDING


@dataclass(frozen=True)
class PaymentStatusChanged:
    order_id: str
    previous: OrderStatus
    current: OrderStatus
    invoice_id: Optional[str] = None
    external_id: Optional[str] = None
    payment_channel: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    paid_at: Optional[datetime] = None
    occurred_at: datetime = field(default_factory=datetime.utcnow)


class PaymentTransaction:
    def __init__(self, order: OrderEntity):
        self.order = order
        self._events: List[PaymentStatusChanged] = []

    @property
    def status(self) -> OrderStatus:
        return self.order.status

    def can_transition(self, target: OrderStatus) -> bool:
        return target == self.order.status or target in ALLOWED_TRANSITIONS[self.order.status]

    def attach_provider_details(self, invoice_id: Optional[str] = None,
                                invoice_url: Optional[str] = None,
                                payment_channel: Optional[str] = None,
                                payer_email: Optional[str] = None,
                                currency: Optional[str] = None,
                                expires_at: Optional[datetime] = None) -> None:
        """결제사 식별 정보 보강 (값이 있는 필드만 덮어쓴다)"""
        o = self.order
        o.xendit_invoice_id = invoice_id or o.xendit_invoice_id
        o.xendit_invoice_url = invoice_url or o.xendit_invoice_url
        o.payment_channel = payment_channel or o.payment_channel
        o.payer_email = payer_email or o.payer_email
        o.currency = currency or o.currency
        o.expires_at = expires_at or o.expires_at

    def transition_to(self, target: OrderStatus, paid_at: Optional[datetime] = None) -> bool:
        """상태 전이. 변경이 있으면 True, 동일 상태면 False"""
        current = self.order.status
        if target == current:
            return False
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(current.value, target.value)

        self.order.status = target
        if target in PAID_LIKE and self.order.paid_at is None:
            self.order.paid_at = paid_at or datetime.utcnow()

        self._events.append(PaymentStatusChanged(
            order_id=self.order.id,
            previous=current,
            current=target,
            invoice_id=self.order.xendit_invoice_id,
            external_id=self.order.client_external_id,
            payment_channel=self.order.payment_channel,
            amount=self.order.amount,
            currency=self.order.currency,
            paid_at=self.order.paid_at,
        ))
        return True

    def pull_events(self) -> List[PaymentStatusChanged]:
        events, self._events = self._events, []
        return events
