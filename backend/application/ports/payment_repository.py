"""결제(payments) Repository 인터페이스"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from domain.entities.records import PaymentRecordEntity, FixedVirtualAccountEntity


class PaymentRepository(ABC):
    @abstractmethod
    async def get_by_xendit_id(self, xendit_id: str) -> Optional[PaymentRecordEntity]: ...
    @abstractmethod
    async def list_by_statuses(self, statuses: Iterable[str], limit: int = 50) -> List[PaymentRecordEntity]: ...
    @abstractmethod
    async def count_by_status(self, since: datetime) -> Dict[str, int]: ...
    @abstractmethod
    async def apply_projection(self, xendit_id: Optional[str], external_id: Optional[str],
                               status: str, paid_at: Optional[datetime] = None) -> int: ...


class FixedVirtualAccountRepository(ABC):
    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Optional[FixedVirtualAccountEntity]: ...
