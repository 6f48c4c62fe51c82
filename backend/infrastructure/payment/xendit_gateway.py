"""Xendit API 클라이언트"""
import base64
from typing import Any, Dict, Optional, Tuple

import httpx
from loguru import logger

from application.ports.payment_gateway import PaymentGatewayPort, ProviderLookup
from domain.enums import LookupOutcome
from infrastructure.payment.xendit_adapters import (
    payment_request_to_payment, invoice_to_payment, invoice_details_to_payment,
    extract_present_to_customer_qr,
)

# 결제사가 해당 ID의 리소스가 없다고 응답한 경우
ABSENT_STATUS_CODES = frozenset({400, 404})
# 시크릿 키가 거부된 경우 (설정 오류)
REJECTED_STATUS_CODES = frozenset({401, 403})


class XenditGateway(PaymentGatewayPort):
    def __init__(self, secret_key: str, api_url: str = "https://api.xendit.co",
                 timeout: float = 30, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.secret_key = secret_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        encoded_secret = base64.b64encode(f"{self.secret_key}:".encode()).decode()
        return {"Authorization": f"Basic {encoded_secret}", "Content-Type": "application/json"}

    async def _fetch(self, path: str) -> Tuple[ProviderLookup, Optional[Dict[str, Any]]]:
        url = f"{self.api_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(url, headers=self._get_headers())
            except httpx.TimeoutException:
                logger.warning(f"Xendit 조회 타임아웃: {path}")
                return ProviderLookup(LookupOutcome.UNAVAILABLE, error="Timeout"), None
            except httpx.RequestError as e:
                logger.warning(f"Xendit 조회 네트워크 오류: {path} - {e}")
                return ProviderLookup(LookupOutcome.UNAVAILABLE, error=str(e)), None

        if response.status_code in ABSENT_STATUS_CODES:
            logger.debug(f"Xendit 리소스 없음: {path} [{response.status_code}]")
            return ProviderLookup(LookupOutcome.NOT_FOUND, status_code=response.status_code), None
        if response.status_code in REJECTED_STATUS_CODES:
            logger.error(f"Xendit 인증 실패: {path} [{response.status_code}] - XENDIT_SECRET_KEY 확인 필요")
            return ProviderLookup(LookupOutcome.REJECTED, status_code=response.status_code,
                                  error=f"HTTP {response.status_code}"), None
        if not response.is_success:
            logger.error(f"Xendit 조회 실패: {path} [{response.status_code}] {response.text[:200]}")
            return ProviderLookup(LookupOutcome.UNAVAILABLE, status_code=response.status_code,
                                  error=f"HTTP {response.status_code}"), None
        try:
            data = response.json()
        except ValueError:
            logger.error(f"Xendit 응답 JSON 파싱 실패: {path}")
            return ProviderLookup(LookupOutcome.UNAVAILABLE, status_code=response.status_code,
                                  error="Invalid JSON"), None
        return ProviderLookup(LookupOutcome.FOUND, status_code=response.status_code), data

    async def find_payment_request(self, payment_id: str) -> ProviderLookup:
        lookup, data = await self._fetch(f"/payment_requests/{payment_id}")
        if not lookup.found:
            return lookup
        return ProviderLookup(LookupOutcome.FOUND, payment=payment_request_to_payment(data),
                              status_code=lookup.status_code)

    async def find_invoice(self, invoice_id: str) -> ProviderLookup:
        lookup, data = await self._fetch(f"/v2/invoices/{invoice_id}")
        if not lookup.found:
            return lookup
        return ProviderLookup(LookupOutcome.FOUND, payment=invoice_to_payment(data),
                              status_code=lookup.status_code)

    async def find_invoice_details(self, invoice_id: str) -> ProviderLookup:
        """인보이스 상세 (은행 목록 원본 포함)"""
        lookup, data = await self._fetch(f"/v2/invoices/{invoice_id}")
        if not lookup.found:
            return lookup
        return ProviderLookup(LookupOutcome.FOUND, payment=invoice_details_to_payment(data), raw=data,
                              status_code=lookup.status_code)

    async def find_qr_string(self, payment_id: str) -> ProviderLookup:
        lookup, data = await self._fetch(f"/v3/payment_requests/{payment_id}")
        if not lookup.found:
            return lookup
        qr_string = extract_present_to_customer_qr(data)
        if not qr_string:
            return ProviderLookup(LookupOutcome.NOT_FOUND, status_code=lookup.status_code)
        return ProviderLookup(LookupOutcome.FOUND, qr_string=qr_string, status_code=lookup.status_code)
