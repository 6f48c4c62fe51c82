"""결제사 게이트웨이 포트 인터페이스"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from domain.enums import LookupOutcome
from domain.entities.normalized_payment import NormalizedPayment


@dataclass(frozen=True)
class ProviderLookup:
    """결제사 조회 결과: '없음 확인'과 '확인 불가'를 구분한다"""
    outcome: LookupOutcome
    payment: Optional[NormalizedPayment] = None
    qr_string: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.outcome == LookupOutcome.FOUND

    @property
    def unavailable(self) -> bool:
        return self.outcome == LookupOutcome.UNAVAILABLE

    @property
    def rejected(self) -> bool:
        return self.outcome == LookupOutcome.REJECTED


class PaymentGatewayPort(ABC):
    @abstractmethod
    async def find_payment_request(self, payment_id: str) -> ProviderLookup: ...
    @abstractmethod
    async def find_invoice(self, invoice_id: str) -> ProviderLookup: ...
    @abstractmethod
    async def find_invoice_details(self, invoice_id: str) -> ProviderLookup: ...
    @abstractmethod
    async def find_qr_string(self, payment_id: str) -> ProviderLookup: ...
