"""인보이스 상세 조회 유스케이스 (결제사 직접 조회, 저장소는 보지 않음)"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger

from application.ports.payment_gateway import PaymentGatewayPort
from domain.entities.normalized_payment import NormalizedPayment
from domain.exceptions import PaymentNotFoundError, PaymentLookupUnavailableError, ProviderConfigurationError


@dataclass
class InvoiceDetails:
    payment: NormalizedPayment
    available_banks: List[Dict[str, Any]] = field(default_factory=list)
    available_virtual_account_banks: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self.payment.to_dict()
        data["available_banks"] = self.available_banks
        data["available_virtual_account_banks"] = self.available_virtual_account_banks
        return data


class GetInvoiceDetailsUseCase:
    def __init__(self, gateway: Optional[PaymentGatewayPort] = None):
        self._gateway = gateway

    async def execute(self, invoice_id: str) -> InvoiceDetails:
        if self._gateway is None:
            raise ProviderConfigurationError()

        lookup = await self._gateway.find_invoice_details(invoice_id)
        if lookup.rejected:
            logger.error(f"[인보이스 조회] Xendit 인증 실패: {invoice_id} ({lookup.error})")
            raise ProviderConfigurationError("결제사 인증에 실패했습니다. XENDIT_SECRET_KEY를 확인하세요.")
        if lookup.unavailable:
            logger.error(f"[인보이스 조회] 결제사 조회 실패: {invoice_id} ({lookup.error})")
            raise PaymentLookupUnavailableError(invoice_id, lookup.error or "")
        if not lookup.found:
            logger.info(f"[인보이스 조회] 인보이스 없음: {invoice_id}")
            raise PaymentNotFoundError(invoice_id)

        raw = lookup.raw or {}
        payment = lookup.payment
        payment.id = payment.id or invoice_id
        return InvoiceDetails(
            payment=payment,
            available_banks=list(raw.get("available_banks") or []),
            available_virtual_account_banks=list(raw.get("available_virtual_account_banks") or []),
        )
