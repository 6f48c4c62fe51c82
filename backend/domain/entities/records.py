"""저장소 행(row) 엔티티: ORM 모델이 아닌 비즈니스 로직용"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any

from domain.enums import OrderStatus, OrderType


@dataclass
class OrderEntity:
    """고객의 구매/렌탈 주문"""
    id: str
    status: OrderStatus = OrderStatus.PENDING
    client_external_id: Optional[str] = None
    xendit_invoice_id: Optional[str] = None
    xendit_invoice_url: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    payment_channel: Optional[str] = None
    payment_method: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    payer_email: Optional[str] = None
    product_id: Optional[str] = None
    order_type: str = OrderType.PURCHASE.value
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


@dataclass
class PaymentRecordEntity:
    """결제사 거래를 미러링하는 payments 행"""
    id: Optional[int] = None
    xendit_id: Optional[str] = None
    external_id: Optional[str] = None
    payment_method: Optional[str] = None
    status: Optional[str] = None  # Xendit 어휘 (ACTIVE/PENDING/PAID/...)
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    payment_data: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None


@dataclass
class FixedVirtualAccountEntity:
    external_id: str
    account_number: str
    bank_code: str
    name: Optional[str] = None
    status: Optional[str] = None
    expiration_date: Optional[datetime] = None
    expected_amount: Optional[Decimal] = None
