"""결제 조회/콜백 스키마"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel


class PaymentResponse(BaseModel):
    """정규화된 결제 정보 (값이 없는 필드는 응답에서 빠진다)"""
    id: str
    payment_method: str = "unknown"
    amount: Optional[Union[int, float]] = None
    currency: str = "IDR"
    status: Optional[str] = None
    external_id: Optional[str] = None
    created: Optional[Union[datetime, str]] = None
    description: Optional[str] = None
    expiry_date: Optional[Union[datetime, str]] = None

    # QR
    qr_string: Optional[str] = None
    qr_url: Optional[str] = None

    # 가상계좌
    account_number: Optional[str] = None
    virtual_account_number: Optional[str] = None
    bank_code: Optional[str] = None
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    transfer_amount: Optional[Union[int, float]] = None

    # 리다이렉트
    payment_url: Optional[str] = None
    invoice_url: Optional[str] = None
    action_type: Optional[str] = None

    # 편의점 결제
    payment_code: Optional[str] = None
    retail_outlet: Optional[str] = None

    # orders 테이블 출처
    order_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    paid_at: Optional[Union[datetime, str]] = None


class CallbackResponse(BaseModel):
    ok: bool = True
    updated: int = 0
    by: str = "none"
    status: Optional[str] = None


class InvoiceDetailsResponse(PaymentResponse):
    """인보이스 상세: 첫 번째 은행의 가상계좌 정보 + 은행 목록 원본"""
    available_banks: List[Dict[str, Any]] = []
    available_virtual_account_banks: List[Dict[str, Any]] = []
