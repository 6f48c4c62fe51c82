"""주문 ORM 모델"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Numeric, Enum
from infrastructure.persistence.database import Base
from domain.enums import OrderStatus, OrderType


class Order(Base):
    __tablename__ = "orders"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_external_id = Column(String(100), unique=True, index=True, nullable=True)
    xendit_invoice_id = Column(String(100), index=True, nullable=True)
    xendit_invoice_url = Column(String(500), nullable=True)
    status = Column(Enum(OrderStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
                    default=OrderStatus.PENDING, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=True)
    currency = Column(String(10), nullable=True)
    payment_channel = Column(String(50), nullable=True)
    payment_method = Column(String(50), nullable=True)
    customer_name = Column(String(100), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(30), nullable=True)
    payer_email = Column(String(255), nullable=True)
    product_id = Column(String(36), nullable=True)
    order_type = Column(String(20), default=OrderType.PURCHASE.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    paid_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Order {self.id} - {self.status}>"
