"""주문(orders) Repository 인터페이스"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from domain.entities.records import OrderEntity
from domain.enums import OrderStatus


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: str) -> Optional[OrderEntity]: ...
    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Optional[OrderEntity]: ...
    @abstractmethod
    async def list_by_status(self, status: OrderStatus, limit: int = 20) -> List[OrderEntity]: ...
    @abstractmethod
    async def find_by_identifiers(self, invoice_ids: Iterable[str],
                                  external_ids: Iterable[str]) -> List[OrderEntity]: ...
    @abstractmethod
    async def count_by_status(self, since: datetime) -> Dict[str, int]: ...
    @abstractmethod
    async def save(self, order: OrderEntity) -> None: ...
