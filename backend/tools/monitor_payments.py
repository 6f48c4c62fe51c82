"""주문/결제 상태 불일치 모니터 CLI

사용법:
  python -m tools.monitor_payments                       불일치 리포트 (표 형식)
  python -m tools.monitor_payments --json                JSON 출력
  python -m tools.monitor_payments --pending-limit 50    pending 주문 조회 개수
  python -m tools.monitor_payments --paid-limit 100      결제 완료 payments 조회 개수

불일치가 있으면 종료 코드 1을 반환한다 (cron 알림용). 읽기 전용.
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import get_settings
from application.use_cases.monitor_status import StatusDriftMonitor, DriftReport
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories.order_repository import SqlAlchemyOrderRepository
from infrastructure.persistence.repositories.payment_repository import SqlAlchemyPaymentRepository


# ==================== 유틸 ====================

def fmt_date(dt) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


def fmt_amount(amount) -> str:
    if amount is None:
        return "-"
    return f"{int(amount):,}"


def print_table(headers: list, rows: list, col_widths: list = None):
    """간단한 테이블 출력"""
    if not col_widths:
        col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                      for i, h in enumerate(headers)]

    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, col_widths))
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def print_report(report: DriftReport) -> None:
    print(f"=== 결제 상태 점검 ({fmt_date(report.generated_at)} UTC) ===\n")

    print(f"[pending 주문 / 결제 완료] {len(report.pending_with_paid)}건")
    if report.pending_with_paid:
        rows = [[p.order.id, p.order.customer_name or "-", fmt_amount(p.order.amount),
                 p.payment.status, p.order.xendit_invoice_id or p.order.client_external_id or "-",
                 fmt_date(p.payment.paid_at)]
                for p in report.pending_with_paid]
        print_table(["주문 ID", "고객", "금액", "결제 상태", "결제 식별자", "결제 시각"], rows)

    print(f"\n[주문 없는 결제] {len(report.orphaned_payments)}건")
    if report.orphaned_payments:
        rows = [[p.id, p.status, fmt_amount(p.amount), p.xendit_id or "-", p.external_id or "-",
                 fmt_date(p.paid_at)]
                for p in report.orphaned_payments]
        print_table(["ID", "상태", "금액", "Xendit ID", "External ID", "결제 시각"], rows)

    print("\n[최근 24시간 주문 상태]")
    for status, count in sorted(report.order_status_counts.items()):
        print(f"  {status}: {count}건")
    print("\n[최근 24시간 결제 상태]")
    for status, count in sorted(report.payment_status_counts.items()):
        print(f"  {status}: {count}건")

    if not report.has_drift:
        print("\n불일치 없음")


# ==================== 명령어 ====================

async def run_monitor(db_url: str, pending_limit: int, paid_limit: int) -> DriftReport:
    database = Database(db_url)
    try:
        async with database.session() as s:
            monitor = StatusDriftMonitor(
                order_repo=SqlAlchemyOrderRepository(s),
                payment_repo=SqlAlchemyPaymentRepository(s),
                pending_limit=pending_limit,
                paid_limit=paid_limit,
            )
            return await monitor.run()
    finally:
        await database.dispose()


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="주문/결제 상태 불일치 모니터")
    parser.add_argument("--json", action="store_true", help="JSON으로 출력")
    parser.add_argument("--pending-limit", type=int, default=settings.MONITOR_PENDING_LIMIT,
                        help="조회할 pending 주문 수")
    parser.add_argument("--paid-limit", type=int, default=settings.MONITOR_PAID_LIMIT,
                        help="조회할 결제 완료 payments 수")
    parser.add_argument("--db-url", default=settings.DB_URL, help="데이터베이스 URL")
    args = parser.parse_args(argv)

    report = asyncio.run(run_monitor(args.db_url, args.pending_limit, args.paid_limit))
    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_report(report)
    return 1 if report.has_drift else 0


if __name__ == "__main__":
    sys.exit(main())
