"""Xendit 콜백(webhook) 처리 유스케이스"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from loguru import logger

from application.ports.order_repository import OrderRepository
from application.use_cases.project_payment_status import PaymentProjector
from domain.entities.transaction import PaymentTransaction, map_provider_status, PAID_LIKE
from domain.enums import OrderStatus
from domain.exceptions import InvalidCallbackError, InvalidStatusTransitionError


@dataclass(frozen=True)
class ParsedCallback:
    invoice_id: Optional[str]
    external_id: Optional[str]
    raw_status: Optional[str]
    status: OrderStatus
    paid_at: Optional[datetime] = None
    payment_channel: Optional[str] = None
    payer_email: Optional[str] = None
    invoice_url: Optional[str] = None
    currency: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass
class CallbackOutput:
    updated: int
    matched_by: str  # "invoice_id" | "external_id" | "none"
    status: str
    changed: bool = False


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _first(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


def parse_callback(payload: Dict[str, Any]) -> ParsedCallback:
    """여러 형태의 콜백 페이로드에서 식별자/상태 추출"""
    event = str(payload.get("event") or payload.get("type") or "")
    data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    qr = data.get("qr_code") if isinstance(data.get("qr_code"), dict) else {}
    pm = data.get("payment_method") if isinstance(data.get("payment_method"), dict) else {}

    invoice_id = _first(data.get("id"), data.get("invoice_id"), data.get("payment_request_id"),
                        data.get("payment_method_id"), qr.get("id"), pm.get("id"))
    external_id = _first(data.get("external_id"), data.get("reference_id"), qr.get("external_id"),
                         qr.get("reference_id"), pm.get("reference_id"), pm.get("external_id"))
    if not invoice_id and not external_id:
        raise InvalidCallbackError("식별자 누락")

    raw_status = _first(data.get("status"), qr.get("status"), pm.get("status"))
    if raw_status is None:
        if "succeeded" in event:
            raw_status = "SUCCEEDED"
        elif "failed" in event:
            raw_status = "FAILED"
        elif "expired" in event:
            raw_status = "EXPIRED"

    payment_channel = _first(data.get("payment_channel"), data.get("payment_method"),
                             data.get("channel_code"), pm.get("type"))
    if payment_channel is None and qr:
        payment_channel = "QRIS"

    payer = data.get("payer") if isinstance(data.get("payer"), dict) else {}
    return ParsedCallback(
        invoice_id=invoice_id,
        external_id=external_id,
        raw_status=raw_status,
        status=map_provider_status(raw_status),
        paid_at=_parse_datetime(data.get("paid_at")),
        payment_channel=payment_channel,
        payer_email=_first(data.get("payer_email"), payer.get("email")),
        invoice_url=_first(data.get("invoice_url")),
        currency=_first(data.get("currency")),
        expires_at=_parse_datetime(data.get("expiry_date")),
    )


class HandleCallbackUseCase:
    def __init__(self, order_repo: OrderRepository, projector: PaymentProjector):
        self._order_repo = order_repo
        self._projector = projector

    async def execute(self, payload: Dict[str, Any]) -> CallbackOutput:
        cb = parse_callback(payload)
        logger.info(f"[콜백] 수신: invoice={cb.invoice_id} external={cb.external_id} status={cb.raw_status}")

        order, matched_by = None, "none"
        if cb.invoice_id:
            order = await self._order_repo.get_by_invoice_id(cb.invoice_id)
            matched_by = "invoice_id"
        if order is None and cb.external_id:
            order = await self._order_repo.get_by_external_id(cb.external_id)
            matched_by = "external_id"
        if order is None:
            logger.warning(f"[콜백] 대응하는 주문 없음: invoice={cb.invoice_id} external={cb.external_id}")
            return CallbackOutput(updated=0, matched_by="none", status=cb.status.value)

        tx = PaymentTransaction(order)
        tx.attach_provider_details(invoice_id=cb.invoice_id, invoice_url=cb.invoice_url,
                                   payment_channel=cb.payment_channel, payer_email=cb.payer_email,
                                   currency=cb.currency, expires_at=cb.expires_at)
        paid_at = cb.paid_at if cb.status in PAID_LIKE else None
        try:
            changed = tx.transition_to(cb.status, paid_at=paid_at)
        except InvalidStatusTransitionError as e:
            # 순서가 뒤바뀐 콜백 (예: PAID 이후 PENDING)
            logger.warning(f"[콜백] 주문 {order.id} 상태 전이 무시: {e}")
            changed = False

        await self._order_repo.save(tx.order)
        for event in tx.pull_events():
            await self._projector.project(event)

        logger.info(f"[콜백] 주문 {order.id} 처리 완료 ({matched_by}): {tx.status.value}")
        return CallbackOutput(updated=1, matched_by=matched_by, status=tx.status.value, changed=changed)
