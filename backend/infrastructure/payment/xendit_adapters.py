"""Xendit 응답 어댑터

API 세대별 응답 형태를 NormalizedPayment로 변환한다.
- Payment Request: payment_method.type 으로 구분되는 flat 구조 + actions 목록
- Invoice v2 (레거시): available_banks 목록 안에 결제 수단 상세가 중첩
"""
from typing import Any, Dict, Iterable, List, Optional

from domain.enums import PaymentSource
from domain.entities.normalized_payment import NormalizedPayment, DEFAULT_CURRENCY
from domain.entities.payment_details import (
    QrDetails, VirtualAccountDetails, RedirectDetails, OverTheCounterDetails,
)

QR_BANK_CODES = frozenset({"QRIS", "ID_SHOPEEPAY"})


def find_action(actions: Any, key: str, value: str) -> Optional[Dict[str, Any]]:
    """actions 목록에서 key == value 인 항목을 선형 탐색"""
    if not isinstance(actions, list):
        return None
    for action in actions:
        if isinstance(action, dict) and action.get(key) == value:
            return action
    return None


def _channel_properties(section: Dict[str, Any]) -> Dict[str, Any]:
    return section.get("channel_properties") or {}


def payment_request_to_payment(data: Dict[str, Any]) -> NormalizedPayment:
    pm = data.get("payment_method") or {}
    details: List[Any] = []

    qr = pm.get("qr") or pm.get("qr_code")
    if qr:
        qr_string = qr.get("qr_string") or _channel_properties(qr).get("qr_string")
        if qr_string:
            details.append(QrDetails(qr_string=qr_string))

    va = pm.get("virtual_account")
    if va:
        props = _channel_properties(va)
        details.append(VirtualAccountDetails(
            account_number=props.get("account_number"),
            bank_code=va.get("channel_code"),
            account_holder_name=props.get("customer_name"),
        ))

    otc = pm.get("over_the_counter")
    if otc:
        details.append(OverTheCounterDetails(
            payment_code=_channel_properties(otc).get("payment_code"),
            retail_outlet=otc.get("channel_code"),
        ))

    actions = data.get("actions")
    auth_action = find_action(actions, "action", "AUTH")
    if auth_action:
        details.append(RedirectDetails(payment_url=auth_action.get("url"),
                                       action_type=auth_action.get("action")))
    elif isinstance(actions, dict):
        # 일부 응답은 actions를 체크아웃 URL 객체로 돌려준다
        checkout_url = actions.get("desktop_web_checkout_url") or actions.get("mobile_web_checkout_url")
        if checkout_url:
            details.append(RedirectDetails(payment_url=checkout_url, invoice_url=checkout_url))

    return NormalizedPayment(
        id=data.get("id"),
        source=PaymentSource.PAYMENT_REQUEST,
        payment_method=pm.get("type") or "unknown",
        amount=data.get("amount"),
        currency=data.get("currency") or DEFAULT_CURRENCY,
        status=data.get("status"),
        external_id=data.get("reference_id"),
        created=data.get("created"),
        description=data.get("description"),
        expiry_date=data.get("expires_at"),
        details=details,
    )


def _find_bank(banks: Iterable[Dict[str, Any]], codes: Iterable[str]) -> Optional[Dict[str, Any]]:
    wanted = {c.upper() for c in codes}
    for bank in banks:
        if (bank.get("bank_code") or "").upper() in wanted:
            return bank
    return None


def invoice_to_payment(data: Dict[str, Any]) -> NormalizedPayment:
    invoice_url = data.get("invoice_url")
    details: List[Any] = []

    banks = list(data.get("available_banks") or []) + list(data.get("available_virtual_account_banks") or [])
    channel = (data.get("payment_channel") or data.get("bank_code") or "").upper()
    bank = _find_bank(banks, [channel] if channel else QR_BANK_CODES)

    if bank:
        code = (bank.get("bank_code") or "").upper()
        if code in QR_BANK_CODES:
            # QRIS 문자열은 bank_branch 필드에 담겨 오기도 한다
            qr_string = bank.get("qr_string") or bank.get("bank_branch")
            if qr_string:
                details.append(QrDetails(qr_string=qr_string, qr_url=qr_string))
        else:
            details.append(VirtualAccountDetails(
                account_number=bank.get("account_number"),
                virtual_account_number=bank.get("virtual_account_number"),
                bank_code=bank.get("bank_code"),
                bank_name=bank.get("bank_name"),
                account_holder_name=bank.get("account_holder_name"),
                transfer_amount=bank.get("transfer_amount"),
            ))

    if invoice_url:
        details.append(RedirectDetails(payment_url=invoice_url, invoice_url=invoice_url))

    return NormalizedPayment(
        id=data.get("id"),
        source=PaymentSource.INVOICE,
        payment_method="invoice",
        amount=data.get("amount"),
        currency=data.get("currency") or DEFAULT_CURRENCY,
        status=data.get("status"),
        external_id=data.get("external_id"),
        created=data.get("created"),
        description=data.get("description"),
        expiry_date=data.get("expiry_date"),
        details=details,
    )


def invoice_details_to_payment(data: Dict[str, Any]) -> NormalizedPayment:
    """인보이스 상세 조회용: 첫 번째 은행 항목을 가상계좌 정보로 사용"""
    details: List[Any] = []
    banks = data.get("available_banks") or data.get("available_virtual_account_banks") or []
    if banks:
        bank = banks[0]
        details.append(VirtualAccountDetails(
            virtual_account_number=bank.get("virtual_account_number") or bank.get("account_number"),
            bank_code=bank.get("bank_code"),
            bank_name=bank.get("bank_name"),
            account_holder_name=bank.get("account_holder_name"),
            transfer_amount=bank.get("transfer_amount"),
        ))
    if data.get("invoice_url"):
        details.append(RedirectDetails(invoice_url=data.get("invoice_url")))

    return NormalizedPayment(
        id=data.get("id"),
        source=PaymentSource.INVOICE,
        payment_method="invoice",
        amount=data.get("amount"),
        currency=data.get("currency") or DEFAULT_CURRENCY,
        status=data.get("status"),
        external_id=data.get("external_id"),
        expiry_date=data.get("expiry_date"),
        details=details,
    )


def extract_present_to_customer_qr(data: Dict[str, Any]) -> Optional[str]:
    """Payment Request v3 응답에서 QR 문자열 추출"""
    action = find_action(data.get("actions"), "type", "PRESENT_TO_CUSTOMER")
    if action:
        return action.get("value") or None
    return None
