"""주문 Repository (SQLAlchemy)"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, func, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.order_repository import OrderRepository
from domain.entities.records import OrderEntity
from domain.enums import OrderStatus
from domain.exceptions import RecordStoreError
from infrastructure.persistence.models.order import Order

_COPY_FIELDS = (
    "client_external_id", "xendit_invoice_id", "xendit_invoice_url", "status", "amount", "currency",
    "payment_channel", "payment_method", "customer_name", "customer_email", "customer_phone",
    "payer_email", "product_id", "order_type", "paid_at", "expires_at",
)


def _to_entity(row: Order) -> OrderEntity:
    return OrderEntity(
        id=row.id,
        status=OrderStatus(row.status),
        created_at=row.created_at,
        **{f: getattr(row, f) for f in _COPY_FIELDS if f != "status"},
    )


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _first(self, stmt) -> Optional[OrderEntity]:
        try:
            result = await self._session.execute(stmt.limit(1))
        except SQLAlchemyError as e:
            raise RecordStoreError("orders", str(e)) from e
        row = result.scalars().first()
        return _to_entity(row) if row else None

    async def get_by_invoice_id(self, invoice_id: str) -> Optional[OrderEntity]:
        return await self._first(
            select(Order).where(Order.xendit_invoice_id == invoice_id).order_by(desc(Order.created_at)))

    async def get_by_external_id(self, external_id: str) -> Optional[OrderEntity]:
        return await self._first(
            select(Order).where(Order.client_external_id == external_id).order_by(desc(Order.created_at)))

    async def list_by_status(self, status: OrderStatus, limit: int = 20) -> List[OrderEntity]:
        stmt = select(Order).where(Order.status == status).order_by(desc(Order.created_at)).limit(limit)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RecordStoreError("orders", str(e)) from e
        return [_to_entity(r) for r in result.scalars().all()]

    async def find_by_identifiers(self, invoice_ids: Iterable[str],
                                  external_ids: Iterable[str]) -> List[OrderEntity]:
        invoice_ids, external_ids = list(invoice_ids), list(external_ids)
        conditions = []
        if invoice_ids:
            conditions.append(Order.xendit_invoice_id.in_(invoice_ids))
        if external_ids:
            conditions.append(Order.client_external_id.in_(external_ids))
        if not conditions:
            return []
        try:
            result = await self._session.execute(select(Order).where(or_(*conditions)))
        except SQLAlchemyError as e:
            raise RecordStoreError("orders", str(e)) from e
        return [_to_entity(r) for r in result.scalars().all()]

    async def count_by_status(self, since: datetime) -> Dict[str, int]:
        stmt = (select(Order.status, func.count(Order.id))
                .where(Order.created_at >= since)
                .group_by(Order.status))
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RecordStoreError("orders", str(e)) from e
        return {OrderStatus(status).value: count for status, count in result.all()}

    async def save(self, order: OrderEntity) -> None:
        try:
            row = await self._session.get(Order, order.id)
            if row is None:
                row = Order(id=order.id, created_at=order.created_at or datetime.utcnow())
                self._session.add(row)
            for f in _COPY_FIELDS:
                setattr(row, f, getattr(order, f))
            await self._session.flush()
        except SQLAlchemyError as e:
            raise RecordStoreError("orders", str(e)) from e
