"""결제 상태 조회(정합) 유스케이스

조회 순서: payments 테이블 -> orders 테이블 -> Payment Request API -> Invoice API (레거시).
어느 출처에서 찾든 하나의 NormalizedPayment로 변환해 돌려준다. 읽기 전용.
"""
from typing import List, Optional

from loguru import logger

from application.ports.order_repository import OrderRepository
from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.payment_repository import PaymentRepository, FixedVirtualAccountRepository
from domain.entities.normalized_payment import NormalizedPayment, DEFAULT_CURRENCY
from domain.entities.payment_details import (
    QrDetails, VirtualAccountDetails, RedirectDetails, details_from_payment_data,
)
from domain.entities.records import OrderEntity, PaymentRecordEntity
from domain.enums import PaymentSource
from domain.exceptions import (
    PaymentNotFoundError, PaymentLookupUnavailableError, ProviderConfigurationError, RecordStoreError,
)

VA_PAYMENT_METHODS = frozenset({"invoice", "bri", "bni", "mandiri", "bca"})
QRIS_PAYMENT_METHODS = frozenset({"qris"})


def payment_record_to_payment(record: PaymentRecordEntity) -> NormalizedPayment:
    return NormalizedPayment(
        id=record.xendit_id,
        source=PaymentSource.PAYMENTS,
        payment_method=record.payment_method or "unknown",
        amount=record.amount,
        currency=record.currency or DEFAULT_CURRENCY,
        status=record.status,
        external_id=record.external_id,
        created=record.created_at,
        description=record.description,
        expiry_date=record.expiry_date,
        details=details_from_payment_data(record.payment_data),
    )


def order_to_payment(order: OrderEntity, requested_id: str) -> NormalizedPayment:
    status = order.status.value if hasattr(order.status, "value") else order.status
    return NormalizedPayment(
        id=order.xendit_invoice_id or requested_id,
        source=PaymentSource.ORDERS,
        payment_method=order.payment_channel or order.payment_method or "unknown",
        amount=order.amount,
        currency=order.currency or DEFAULT_CURRENCY,
        status=status.upper() if status else None,
        external_id=order.client_external_id or order.id,
        created=order.created_at,
        description=f"Order {order.id}",
        expiry_date=order.expires_at,
        order_id=order.id,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        paid_at=order.paid_at,
    )


class GetPaymentUseCase:
    def __init__(
        self,
        payment_repo: PaymentRepository,
        order_repo: OrderRepository,
        gateway: Optional[PaymentGatewayPort] = None,
        va_repo: Optional[FixedVirtualAccountRepository] = None,
    ):
        self._payment_repo = payment_repo
        self._order_repo = order_repo
        self._gateway = gateway
        self._va_repo = va_repo

    async def execute(self, payment_id: str) -> NormalizedPayment:
        # 1. payments 테이블
        record = await self._payment_repo.get_by_xendit_id(payment_id)
        if record is not None:
            logger.info(f"[결제 조회] payments 테이블에서 발견: {payment_id} ({record.status})")
            payment = payment_record_to_payment(record)
            await self._fill_virtual_account(record, payment)
            await self._fill_qr_string(record, payment)
            return payment

        # 2. orders 테이블
        order = await self._order_repo.get_by_invoice_id(payment_id)
        if order is not None:
            logger.info(f"[결제 조회] orders 테이블에서 발견: {payment_id} ({order.status})")
            return order_to_payment(order, payment_id)

        # 3. 결제사 직접 조회
        if self._gateway is None:
            raise ProviderConfigurationError()

        failures: List[str] = []
        for tier, lookup_fn in (("payment_request", self._gateway.find_payment_request),
                                ("invoice", self._gateway.find_invoice)):
            lookup = await lookup_fn(payment_id)
            if lookup.found:
                logger.info(f"[결제 조회] Xendit {tier} API에서 발견: {payment_id}")
                payment = lookup.payment
                payment.id = payment.id or payment_id
                return payment
            if lookup.rejected:
                logger.error(f"[결제 조회] Xendit {tier} API 인증 실패: {payment_id} ({lookup.error})")
                raise ProviderConfigurationError("결제사 인증에 실패했습니다. XENDIT_SECRET_KEY를 확인하세요.")
            if lookup.unavailable:
                failures.append(f"{tier}: {lookup.error}")

        if failures:
            logger.error(f"[결제 조회] 결제사 조회 실패로 부재 확인 불가: {payment_id} - {failures}")
            raise PaymentLookupUnavailableError(payment_id, "; ".join(failures))
        logger.info(f"[결제 조회] 모든 출처에서 없음: {payment_id}")
        raise PaymentNotFoundError(payment_id)

    async def _fill_virtual_account(self, record: PaymentRecordEntity, payment: NormalizedPayment) -> None:
        """VA 결제인데 계좌 정보가 없으면 fixed_virtual_accounts에서 보강"""
        if (record.payment_method or "").lower() not in VA_PAYMENT_METHODS:
            return
        pd = record.payment_data or {}
        if pd.get("account_number") or pd.get("virtual_account_number"):
            return
        if self._va_repo is None or not record.external_id:
            return

        try:
            va = await self._va_repo.get_by_external_id(record.external_id)
        except RecordStoreError as e:
            logger.warning(f"[결제 조회] Fixed VA 조회 실패: {e}")
            return
        if va is None:
            logger.info(f"[결제 조회] Fixed VA 없음: {record.external_id}")
            return

        payment.replace_detail(VirtualAccountDetails(
            account_number=va.account_number,
            bank_code=va.bank_code,
            bank_name=f"{va.bank_code} VA",
            account_holder_name=va.name,
            transfer_amount=va.expected_amount,
        ))
        redirect = payment.detail_of(RedirectDetails)
        if redirect and not redirect.invoice_url:
            payment.replace_detail(RedirectDetails(payment_url=redirect.payment_url,
                                                   invoice_url=redirect.payment_url,
                                                   action_type=redirect.action_type))

    async def _fill_qr_string(self, record: PaymentRecordEntity, payment: NormalizedPayment) -> None:
        """QRIS 결제인데 QR 문자열이 없으면 Payment Request v3에서 보강 (저장하지 않음)"""
        if (record.payment_method or "").lower() not in QRIS_PAYMENT_METHODS or payment.qr_string:
            return
        if self._gateway is None or not record.xendit_id:
            return

        lookup = await self._gateway.find_qr_string(record.xendit_id)
        if lookup.found:
            payment.replace_detail(QrDetails(qr_string=lookup.qr_string, qr_url=lookup.qr_string))
        else:
            logger.warning(f"[결제 조회] QR 문자열 복구 실패: {record.xendit_id} ({lookup.outcome.value})")
