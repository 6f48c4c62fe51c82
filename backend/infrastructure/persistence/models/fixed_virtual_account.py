"""고정 가상계좌 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Numeric
from infrastructure.persistence.database import Base


class FixedVirtualAccount(Base):
    __tablename__ = "fixed_virtual_accounts"
    id = Column(Integer, primary_key=True, index=True)
    external_id = Column(String(100), unique=True, index=True, nullable=False)
    account_number = Column(String(50), nullable=False)
    bank_code = Column(String(20), nullable=False)
    name = Column(String(100), nullable=True)
    status = Column(String(30), nullable=True)
    expiration_date = Column(DateTime, nullable=True)
    expected_amount = Column(Numeric(14, 2), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
