"""주문/결제 상태 불일치 모니터

pending 주문과 결제 완료된 payments 행을 각각 조회해 애플리케이션 레벨에서 매칭한다.
보고만 하며 어떤 수정도 하지 않는다.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from application.ports.order_repository import OrderRepository
from application.ports.payment_repository import PaymentRepository
from domain.entities.records import OrderEntity, PaymentRecordEntity
from domain.enums import OrderStatus, PAID_PAYMENT_STATUSES


@dataclass
class DriftPair:
    order: OrderEntity
    payment: PaymentRecordEntity


@dataclass
class DriftReport:
    pending_with_paid: List[DriftPair] = field(default_factory=list)
    orphaned_payments: List[PaymentRecordEntity] = field(default_factory=list)
    order_status_counts: Dict[str, int] = field(default_factory=dict)
    payment_status_counts: Dict[str, int] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def has_drift(self) -> bool:
        return bool(self.pending_with_paid or self.orphaned_payments)

    def to_dict(self) -> dict:
        return {
            "generated_at": self.generated_at.isoformat(),
            "pending_with_paid": [
                {"order_id": p.order.id, "customer_name": p.order.customer_name,
                 "amount": float(p.order.amount) if p.order.amount is not None else None,
                 "order_status": p.order.status.value, "payment_status": p.payment.status,
                 "external_id": p.order.client_external_id, "invoice_id": p.order.xendit_invoice_id,
                 "order_paid_at": p.order.paid_at.isoformat() if p.order.paid_at else None,
                 "payment_paid_at": p.payment.paid_at.isoformat() if p.payment.paid_at else None}
                for p in self.pending_with_paid
            ],
            "orphaned_payments": [
                {"payment_id": p.id, "status": p.status,
                 "amount": float(p.amount) if p.amount is not None else None,
                 "external_id": p.external_id, "xendit_id": p.xendit_id,
                 "paid_at": p.paid_at.isoformat() if p.paid_at else None}
                for p in self.orphaned_payments
            ],
            "order_status_counts": self.order_status_counts,
            "payment_status_counts": self.payment_status_counts,
        }


def _match_order(payment: PaymentRecordEntity, by_invoice: Dict[str, OrderEntity],
                 by_external: Dict[str, OrderEntity]) -> Optional[OrderEntity]:
    if payment.xendit_id and payment.xendit_id in by_invoice:
        return by_invoice[payment.xendit_id]
    if payment.external_id and payment.external_id in by_external:
        return by_external[payment.external_id]
    return None


class StatusDriftMonitor:
    def __init__(self, order_repo: OrderRepository, payment_repo: PaymentRepository,
                 pending_limit: int = 20, paid_limit: int = 50,
                 summary_window: timedelta = timedelta(hours=24)):
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._pending_limit = pending_limit
        self._paid_limit = paid_limit
        self._summary_window = summary_window

    async def run(self, now: Optional[datetime] = None) -> DriftReport:
        now = now or datetime.utcnow()
        report = DriftReport(generated_at=now)

        pending_orders = await self._order_repo.list_by_status(OrderStatus.PENDING, limit=self._pending_limit)
        paid_payments = await self._payment_repo.list_by_statuses(PAID_PAYMENT_STATUSES, limit=self._paid_limit)

        # 1. pending 주문인데 결제는 완료된 경우
        by_invoice = {o.xendit_invoice_id: o for o in pending_orders if o.xendit_invoice_id}
        by_external = {o.client_external_id: o for o in pending_orders if o.client_external_id}
        for payment in paid_payments:
            order = _match_order(payment, by_invoice, by_external)
            if order is not None:
                report.pending_with_paid.append(DriftPair(order=order, payment=payment))

        # 2. 결제는 완료됐는데 주문이 아예 없는 경우 (1번과 같은 키 순서로 확인)
        invoice_ids = {p.xendit_id for p in paid_payments if p.xendit_id}
        external_ids = {p.external_id for p in paid_payments if p.external_id}
        known = await self._order_repo.find_by_identifiers(invoice_ids, external_ids) if paid_payments else []
        known_invoice = {o.xendit_invoice_id: o for o in known if o.xendit_invoice_id}
        known_external = {o.client_external_id: o for o in known if o.client_external_id}
        for payment in paid_payments:
            if _match_order(payment, known_invoice, known_external) is None:
                report.orphaned_payments.append(payment)

        # 3. 최근 상태 요약
        since = now - self._summary_window
        report.order_status_counts = await self._order_repo.count_by_status(since)
        report.payment_status_counts = await self._payment_repo.count_by_status(since)
        return report
