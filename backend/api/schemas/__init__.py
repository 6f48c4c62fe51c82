"""API 스키마 re-export"""
from api.schemas.common import ErrorResponse
from api.schemas.payment import PaymentResponse, CallbackResponse
