"""정규화된 결제 정보 값 객체"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from domain.enums import PaymentSource
from domain.entities.payment_details import PaymentDetails, QrDetails

DEFAULT_CURRENCY = "IDR"


def _json_number(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


@dataclass
class NormalizedPayment:
    """저장소/결제사 API 버전과 무관한 단일 결제 응답 계약"""
    id: str
    source: PaymentSource
    payment_method: str = "unknown"
    amount: Optional[Union[int, float, Decimal]] = None
    currency: str = DEFAULT_CURRENCY
    status: Optional[str] = None
    external_id: Optional[str] = None
    created: Optional[Union[datetime, str]] = None
    description: Optional[str] = None
    expiry_date: Optional[Union[datetime, str]] = None
    details: List[PaymentDetails] = field(default_factory=list)

    # orders 테이블에서 온 경우에만 채워진다
    order_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    paid_at: Optional[Union[datetime, str]] = None

    def detail_of(self, detail_type):
        for detail in self.details:
            if isinstance(detail, detail_type):
                return detail
        return None

    @property
    def qr_string(self) -> Optional[str]:
        qr = self.detail_of(QrDetails)
        return qr.qr_string if qr else None

    def replace_detail(self, detail: PaymentDetails) -> None:
        """같은 종류의 상세 정보를 교체 (없으면 추가)"""
        self.details = [d for d in self.details if d.kind != detail.kind] + [detail]

    def to_dict(self) -> Dict[str, Any]:
        """API 응답용 flat dict (None 필드 제외)"""
        data: Dict[str, Any] = {
            "id": self.id,
            "payment_method": self.payment_method or "unknown",
            "amount": _json_number(self.amount),
            "currency": self.currency or DEFAULT_CURRENCY,
            "status": self.status,
            "external_id": self.external_id,
            "created": self.created,
            "description": self.description,
            "expiry_date": self.expiry_date,
            "order_id": self.order_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "paid_at": self.paid_at,
        }
        for detail in self.details:
            for key, value in detail.flat_fields().items():
                if value is not None and data.get(key) is None:
                    data[key] = _json_number(value)
        return {k: v for k, v in data.items() if v is not None}
