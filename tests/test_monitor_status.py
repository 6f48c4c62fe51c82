"""주문/결제 상태 불일치 모니터 테스트"""
from datetime import datetime, timedelta
from decimal import Decimal

from application.use_cases.monitor_status import StatusDriftMonitor
from domain.entities.records import OrderEntity, PaymentRecordEntity
from domain.enums import OrderStatus
from conftest import InMemoryOrderRepository, InMemoryPaymentRepository

NOW = datetime(2024, 5, 2, 12, 0)


def build_monitor(orders, payments, **kwargs):
    return StatusDriftMonitor(InMemoryOrderRepository(orders), InMemoryPaymentRepository(payments), **kwargs)


async def test_pending_order_with_paid_payment_by_invoice_id():
    orders = [OrderEntity(id="o-1", xendit_invoice_id="inv_1", amount=Decimal("10000"), created_at=NOW)]
    payments = [PaymentRecordEntity(id=1, xendit_id="inv_1", status="PAID", created_at=NOW)]

    report = await build_monitor(orders, payments).run(now=NOW)

    assert report.has_drift
    assert [(p.order.id, p.payment.id) for p in report.pending_with_paid] == [("o-1", 1)]
    assert report.orphaned_payments == []


async def test_match_by_external_id_when_xendit_id_differs():
    orders = [OrderEntity(id="o-2", client_external_id="ORD-2", xendit_invoice_id="inv_2")]
    payments = [PaymentRecordEntity(id=2, xendit_id="pr_other", external_id="ORD-2", status="SUCCEEDED")]

    report = await build_monitor(orders, payments).run(now=NOW)

    assert [p.order.id for p in report.pending_with_paid] == ["o-2"]
    assert report.orphaned_payments == []


async def test_consistent_orders_report_no_drift():
    orders = [OrderEntity(id="o-3", xendit_invoice_id="inv_3", status=OrderStatus.PAID, created_at=NOW)]
    payments = [PaymentRecordEntity(id=3, xendit_id="inv_3", status="PAID", created_at=NOW)]

    report = await build_monitor(orders, payments).run(now=NOW)

    assert not report.has_drift
    assert report.order_status_counts == {"paid": 1}
    assert report.payment_status_counts == {"PAID": 1}


async def test_orphaned_paid_payments():
    orders = [OrderEntity(id="o-4", client_external_id="ORD-4", status=OrderStatus.PAID)]
    payments = [
        PaymentRecordEntity(id=4, xendit_id="inv_404", status="PAID"),
        PaymentRecordEntity(id=5, external_id="ORD-4", status="COMPLETED"),
        PaymentRecordEntity(id=6, external_id="ORD-GONE", status="PAID"),
        PaymentRecordEntity(id=7, xendit_id="inv_pending", status="PENDING"),
    ]

    report = await build_monitor(orders, payments).run(now=NOW)

    assert [p.id for p in report.orphaned_payments] == [4, 6]


async def test_summary_window_excludes_old_rows():
    old = NOW - timedelta(days=2)
    orders = [OrderEntity(id="o-5", created_at=old), OrderEntity(id="o-6", created_at=NOW)]
    payments = [PaymentRecordEntity(id=8, status="EXPIRED", created_at=old)]

    report = await build_monitor(orders, payments).run(now=NOW)

    assert report.order_status_counts == {"pending": 1}
    assert report.payment_status_counts == {}


async def test_limits_are_applied():
    orders = [OrderEntity(id=f"o-{i}", xendit_invoice_id=f"inv_{i}") for i in range(5)]
    payments = [PaymentRecordEntity(id=i, xendit_id=f"inv_{i}", status="PAID") for i in range(5)]

    report = await build_monitor(orders, payments, pending_limit=2, paid_limit=5).run(now=NOW)

    assert len(report.pending_with_paid) == 2


async def test_report_to_dict():
    orders = [OrderEntity(id="o-1", xendit_invoice_id="inv_1", customer_name="Budi",
                          amount=Decimal("10000"))]
    payments = [PaymentRecordEntity(id=1, xendit_id="inv_1", status="PAID",
                                    paid_at=datetime(2024, 5, 2, 11, 0))]

    data = (await build_monitor(orders, payments).run(now=NOW)).to_dict()

    assert data["generated_at"] == "2024-05-02T12:00:00"
    assert data["pending_with_paid"][0]["customer_name"] == "Budi"
    assert data["pending_with_paid"][0]["amount"] == 10000.0
    assert data["pending_with_paid"][0]["payment_paid_at"] == "2024-05-02T11:00:00"
    assert data["orphaned_payments"] == []


async def test_payment_known_by_external_id_is_not_orphaned():
    orders = [OrderEntity(id="o-7", client_external_id="ORD-7", xendit_invoice_id="inv_7",
                          status=OrderStatus.PAID)]
    payments = [PaymentRecordEntity(id=9, xendit_id="pr_retry", external_id="ORD-7", status="PAID"),
                PaymentRecordEntity(id=10, xendit_id="pr_lost", external_id="ORD-LOST", status="PAID")]

    report = await build_monitor(orders, payments).run(now=NOW)

    assert report.pending_with_paid == []
    assert [p.id for p in report.orphaned_payments] == [10]
