"""도메인 열거형"""
import enum


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    REFUNDED = "refunded"


class OrderType(str, enum.Enum):
    PURCHASE = "purchase"
    RENTAL = "rental"


class PaymentMethodKind(str, enum.Enum):
    """결제 수단별 상세 정보 태그"""
    QR = "qr"
    VIRTUAL_ACCOUNT = "virtual_account"
    REDIRECT = "redirect"
    OVER_THE_COUNTER = "over_the_counter"


class LookupOutcome(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    REJECTED = "rejected"  # 인증 실패 (시크릿 키 오류)


class PaymentSource(str, enum.Enum):
    """정규화된 결제 정보의 출처"""
    PAYMENTS = "payments"
    ORDERS = "orders"
    PAYMENT_REQUEST = "payment_request"
    INVOICE = "invoice"


# payments.status 중 결제 완료로 간주하는 값 (Xendit 어휘)
PAID_PAYMENT_STATUSES = ("PAID", "COMPLETED", "SUCCEEDED")

# orders.status -> payments.status 투영
ORDER_TO_PAYMENT_STATUS = {
    OrderStatus.PENDING: "PENDING",
    OrderStatus.PAID: "PAID",
    OrderStatus.COMPLETED: "COMPLETED",
    OrderStatus.CANCELLED: "CANCELLED",
    OrderStatus.EXPIRED: "EXPIRED",
    OrderStatus.REFUNDED: "REFUNDED",
}
