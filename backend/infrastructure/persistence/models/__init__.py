"""
ORM 모델: 모든 모델을 re-export
"""
from infrastructure.persistence.database import Base
from infrastructure.persistence.models.order import Order
from infrastructure.persistence.models.payment import Payment
from infrastructure.persistence.models.fixed_virtual_account import FixedVirtualAccount
from domain.enums import OrderStatus
