"""결제 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, JSON
from infrastructure.persistence.database import Base


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Integer, primary_key=True, index=True)
    xendit_id = Column(String(100), unique=True, index=True, nullable=True)
    external_id = Column(String(100), index=True, nullable=True)
    payment_method = Column(String(50), nullable=True)
    status = Column(String(30), nullable=True, index=True)  # Xendit 어휘 그대로 저장
    amount = Column(Numeric(14, 2), nullable=True)
    currency = Column(String(10), nullable=True)
    description = Column(Text, nullable=True)
    payment_data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expiry_date = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Payment {self.xendit_id} - {self.status}>"
