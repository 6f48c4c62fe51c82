"""
공통 테스트 픽스처

- 유스케이스 테스트: 메모리 Repository + httpx.MockTransport로 만든 Xendit 게이트웨이
- API 테스트: 임시 SQLite 파일 + TestClient
"""
import asyncio
from typing import Dict, Iterable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from config import Settings
from application.ports.order_repository import OrderRepository
from application.ports.payment_repository import PaymentRepository, FixedVirtualAccountRepository
from domain.entities.records import OrderEntity, PaymentRecordEntity, FixedVirtualAccountEntity
from domain.exceptions import RecordStoreError
from infrastructure.payment.xendit_gateway import XenditGateway
from infrastructure.persistence.database import Database


# ==================== 메모리 Repository ====================

class InMemoryPaymentRepository(PaymentRepository):
    def __init__(self, records: Iterable[PaymentRecordEntity] = ()):
        self.records: List[PaymentRecordEntity] = list(records)

    async def get_by_xendit_id(self, xendit_id):
        return next((r for r in self.records if r.xendit_id == xendit_id), None)

    async def list_by_statuses(self, statuses, limit=50):
        statuses = set(statuses)
        return [r for r in self.records if r.status in statuses][:limit]

    async def count_by_status(self, since):
        counts: Dict[str, int] = {}
        for r in self.records:
            if r.created_at is None or r.created_at >= since:
                counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    async def apply_projection(self, xendit_id, external_id, status, paid_at=None):
        matched = [r for r in self.records if xendit_id and r.xendit_id == xendit_id]
        if not matched and external_id:
            matched = [r for r in self.records if r.external_id == external_id]
        for r in matched:
            r.status = status
            if paid_at is not None:
                r.paid_at = paid_at
        return len(matched)


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, orders: Iterable[OrderEntity] = ()):
        self.orders: List[OrderEntity] = list(orders)
        self.saved: List[OrderEntity] = []

    async def get_by_invoice_id(self, invoice_id):
        return next((o for o in self.orders if o.xendit_invoice_id == invoice_id), None)

    async def get_by_external_id(self, external_id):
        return next((o for o in self.orders if o.client_external_id == external_id), None)

    async def list_by_status(self, status, limit=20):
        return [o for o in self.orders if o.status == status][:limit]

    async def find_by_identifiers(self, invoice_ids, external_ids):
        invoice_ids, external_ids = set(invoice_ids), set(external_ids)
        return [o for o in self.orders
                if o.xendit_invoice_id in invoice_ids or o.client_external_id in external_ids]

    async def count_by_status(self, since):
        counts: Dict[str, int] = {}
        for o in self.orders:
            if o.created_at is None or o.created_at >= since:
                counts[o.status.value] = counts.get(o.status.value, 0) + 1
        return counts

    async def save(self, order):
        self.orders = [o for o in self.orders if o.id != order.id] + [order]
        self.saved.append(order)


class InMemoryFixedVirtualAccountRepository(FixedVirtualAccountRepository):
    def __init__(self, accounts: Iterable[FixedVirtualAccountEntity] = (), fail: bool = False):
        self.accounts = list(accounts)
        self.fail = fail

    async def get_by_external_id(self, external_id):
        if self.fail:
            raise RecordStoreError("fixed_virtual_accounts", "connection refused")
        return next((a for a in self.accounts if a.external_id == external_id), None)


# ==================== 가짜 Xendit ====================

class FakeXendit:
    """경로별 응답을 등록해 두는 MockTransport 핸들러. 등록되지 않은 경로는 404"""

    def __init__(self):
        self.routes: Dict[str, tuple] = {}
        self.requests: List[httpx.Request] = []

    def respond(self, path: str, status_code: int = 200, json=None):
        self.routes[path] = (status_code, json, None)

    def fail(self, path: str, exc_type=httpx.ConnectError):
        self.routes[path] = (None, None, exc_type)

    def requested_paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body, exc_type = self.routes.get(
            request.url.path, (404, {"error_code": "DATA_NOT_FOUND"}, None))
        if exc_type is not None:
            raise exc_type("provider unreachable", request=request)
        return httpx.Response(status_code, json=body)


@pytest.fixture
def fake_xendit():
    return FakeXendit()


@pytest.fixture
def gateway(fake_xendit):
    return XenditGateway(secret_key="xnd_development_test", api_url="https://api.xendit.test",
                         transport=httpx.MockTransport(fake_xendit))


@pytest.fixture
def payment_repo():
    return InMemoryPaymentRepository()


@pytest.fixture
def order_repo():
    return InMemoryOrderRepository()


# ==================== API ====================

@pytest.fixture
def settings(tmp_path):
    return Settings(
        DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        XENDIT_SECRET_KEY="xnd_development_test",
        XENDIT_API_URL="https://api.xendit.test",
        XENDIT_CALLBACK_TOKEN="callback-token",
        LOG_FILE=str(tmp_path / "app.log"),
    )


def seed(db_url: str, *rows) -> None:
    """API 테스트용 행 삽입 (앱과 같은 SQLite 파일에 별도 엔진으로 기록)"""
    async def _seed():
        database = Database(db_url)
        await database.init_db()
        async with database.session() as s:
            s.add_all(rows)
        await database.dispose()
    asyncio.run(_seed())


def fetch_all(db_url: str, model) -> list:
    async def _fetch():
        from sqlalchemy import select
        database = Database(db_url)
        async with database.session() as s:
            rows = (await s.execute(select(model))).scalars().all()
        await database.dispose()
        return rows
    return asyncio.run(_fetch())


@pytest.fixture
def client(settings, fake_xendit):
    from main import create_app
    from api.dependencies import get_gateway

    app = create_app(settings)
    app.dependency_overrides[get_gateway] = lambda: XenditGateway(
        secret_key=settings.XENDIT_SECRET_KEY, api_url=settings.XENDIT_API_URL,
        transport=httpx.MockTransport(fake_xendit))
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
