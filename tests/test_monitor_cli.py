"""상태 모니터 CLI 테스트"""
import json
from datetime import datetime

from domain.enums import OrderStatus
from infrastructure.persistence.models import Order, Payment
from tools import monitor_payments
from conftest import seed


def test_json_report_and_exit_code(tmp_path, capsys):
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'monitor.db'}"
    now = datetime.utcnow()
    seed(db_url,
         Order(id="o-1", xendit_invoice_id="inv_1", status=OrderStatus.PENDING, created_at=now),
         Payment(xendit_id="inv_1", status="PAID", created_at=now),
         Payment(xendit_id="inv_orphan", status="SUCCEEDED", created_at=now))

    code = monitor_payments.main(["--json", "--db-url", db_url])

    report = json.loads(capsys.readouterr().out)
    assert code == 1
    assert [p["order_id"] for p in report["pending_with_paid"]] == ["o-1"]
    assert [p["xendit_id"] for p in report["orphaned_payments"]] == ["inv_orphan"]
    assert report["order_status_counts"] == {"pending": 1}


def test_table_report_without_drift(tmp_path, capsys):
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'monitor.db'}"
    seed(db_url, Order(id="o-1", xendit_invoice_id="inv_1", status=OrderStatus.PAID),
         Payment(xendit_id="inv_1", status="PAID"))

    code = monitor_payments.main(["--db-url", db_url])

    out = capsys.readouterr().out
    assert code == 0
    assert "불일치 없음" in out
    assert "paid: 1건" in out
