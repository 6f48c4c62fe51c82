"""결제 수단별 상세 정보 (태그드 유니언)

결제사 API 버전과 무관하게 하나의 내부 표현을 유지한다.
각 값 객체는 kind 태그로 구분되며 flat_fields()로 응답 필드에 펼쳐진다.
"""
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from domain.enums import PaymentMethodKind


@dataclass(frozen=True)
class QrDetails:
    qr_string: Optional[str] = None
    qr_url: Optional[str] = None
    kind: PaymentMethodKind = PaymentMethodKind.QR

    def flat_fields(self) -> Dict[str, Any]:
        return {"qr_string": self.qr_string, "qr_url": self.qr_url}


@dataclass(frozen=True)
class VirtualAccountDetails:
    account_number: Optional[str] = None
    virtual_account_number: Optional[str] = None
    bank_code: Optional[str] = None
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    transfer_amount: Optional[Union[int, float, Decimal]] = None
    kind: PaymentMethodKind = PaymentMethodKind.VIRTUAL_ACCOUNT

    def flat_fields(self) -> Dict[str, Any]:
        fields = asdict(self)
        fields.pop("kind")
        # 프론트엔드는 virtual_account_number를 우선 읽는다
        fields["virtual_account_number"] = self.virtual_account_number or self.account_number
        return fields


@dataclass(frozen=True)
class RedirectDetails:
    """e-wallet/인보이스처럼 고객을 결제 페이지로 보내는 방식"""
    payment_url: Optional[str] = None
    invoice_url: Optional[str] = None
    action_type: Optional[str] = None
    kind: PaymentMethodKind = PaymentMethodKind.REDIRECT

    def flat_fields(self) -> Dict[str, Any]:
        return {"payment_url": self.payment_url, "invoice_url": self.invoice_url,
                "action_type": self.action_type}


@dataclass(frozen=True)
class OverTheCounterDetails:
    payment_code: Optional[str] = None
    retail_outlet: Optional[str] = None
    kind: PaymentMethodKind = PaymentMethodKind.OVER_THE_COUNTER

    def flat_fields(self) -> Dict[str, Any]:
        return {"payment_code": self.payment_code, "retail_outlet": self.retail_outlet}


PaymentDetails = Union[QrDetails, VirtualAccountDetails, RedirectDetails, OverTheCounterDetails]


VA_FIELDS = ("account_number", "virtual_account_number", "bank_code", "bank_name",
             "account_holder_name", "transfer_amount")


def details_from_payment_data(payment_data: Optional[Dict[str, Any]]) -> list:
    """payments.payment_data JSON에서 존재하는 상세 정보를 모두 추출"""
    pd = payment_data or {}
    details = []

    if pd.get("qr_string") or pd.get("qr_url"):
        details.append(QrDetails(qr_string=pd.get("qr_string"), qr_url=pd.get("qr_url")))

    if any(pd.get(key) is not None for key in VA_FIELDS):
        details.append(VirtualAccountDetails(**{key: pd.get(key) for key in VA_FIELDS}))

    if pd.get("payment_url") or pd.get("invoice_url") or pd.get("action_type"):
        details.append(RedirectDetails(payment_url=pd.get("payment_url"),
                                       invoice_url=pd.get("invoice_url"),
                                       action_type=pd.get("action_type")))

    if pd.get("payment_code") or pd.get("retail_outlet"):
        details.append(OverTheCounterDetails(payment_code=pd.get("payment_code"),
                                             retail_outlet=pd.get("retail_outlet")))
    return details
