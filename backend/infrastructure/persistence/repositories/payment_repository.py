"""결제 Repository (SQLAlchemy)"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, update, func, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.payment_repository import PaymentRepository, FixedVirtualAccountRepository
from domain.entities.records import PaymentRecordEntity, FixedVirtualAccountEntity
from domain.exceptions import RecordStoreError
from infrastructure.persistence.models.payment import Payment
from infrastructure.persistence.models.fixed_virtual_account import FixedVirtualAccount


def _to_entity(row: Payment) -> PaymentRecordEntity:
    return PaymentRecordEntity(
        id=row.id, xendit_id=row.xendit_id, external_id=row.external_id,
        payment_method=row.payment_method, status=row.status, amount=row.amount,
        currency=row.currency, description=row.description, payment_data=row.payment_data or {},
        created_at=row.created_at, expiry_date=row.expiry_date, paid_at=row.paid_at,
    )


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _execute(self, stmt):
        try:
            return await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RecordStoreError("payments", str(e)) from e

    async def get_by_xendit_id(self, xendit_id: str) -> Optional[PaymentRecordEntity]:
        result = await self._execute(select(Payment).where(Payment.xendit_id == xendit_id).limit(1))
        row = result.scalars().first()
        return _to_entity(row) if row else None

    async def list_by_statuses(self, statuses: Iterable[str], limit: int = 50) -> List[PaymentRecordEntity]:
        stmt = (select(Payment).where(Payment.status.in_(list(statuses)))
                .order_by(desc(Payment.created_at)).limit(limit))
        result = await self._execute(stmt)
        return [_to_entity(r) for r in result.scalars().all()]

    async def count_by_status(self, since: datetime) -> Dict[str, int]:
        stmt = (select(Payment.status, func.count(Payment.id))
                .where(Payment.created_at >= since)
                .group_by(Payment.status))
        result = await self._execute(stmt)
        return {status or "UNKNOWN": count for status, count in result.all()}

    async def apply_projection(self, xendit_id: Optional[str], external_id: Optional[str],
                               status: str, paid_at: Optional[datetime] = None) -> int:
        if xendit_id:
            condition = Payment.xendit_id == xendit_id
        elif external_id:
            condition = Payment.external_id == external_id
        else:
            return 0
        values = {"status": status, "updated_at": datetime.utcnow()}
        if paid_at is not None:
            values["paid_at"] = paid_at
        result = await self._execute(update(Payment).where(condition).values(**values))
        updated = result.rowcount or 0
        if updated == 0 and xendit_id and external_id:
            result = await self._execute(
                update(Payment).where(Payment.external_id == external_id).values(**values))
            updated = result.rowcount or 0
        return updated


class SqlAlchemyFixedVirtualAccountRepository(FixedVirtualAccountRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_external_id(self, external_id: str) -> Optional[FixedVirtualAccountEntity]:
        stmt = select(FixedVirtualAccount).where(FixedVirtualAccount.external_id == external_id).limit(1)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise RecordStoreError("fixed_virtual_accounts", str(e)) from e
        row = result.scalars().first()
        if row is None:
            return None
        return FixedVirtualAccountEntity(
            external_id=row.external_id, account_number=row.account_number, bank_code=row.bank_code,
            name=row.name, status=row.status, expiration_date=row.expiration_date,
            expected_amount=row.expected_amount,
        )
