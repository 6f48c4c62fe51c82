"""
FastAPI 의존성 주입 (Depends)

모든 라우터에서 사용하는 공통 의존성을 정의한다.
"""
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, get_settings
from application.ports.payment_gateway import PaymentGatewayPort
from application.use_cases.get_invoice_details import GetInvoiceDetailsUseCase
from application.use_cases.get_payment import GetPaymentUseCase
from application.use_cases.handle_callback import HandleCallbackUseCase
from application.use_cases.project_payment_status import PaymentProjector
from infrastructure.payment.xendit_gateway import XenditGateway
from infrastructure.persistence.repositories.order_repository import SqlAlchemyOrderRepository
from infrastructure.persistence.repositories.payment_repository import (
    SqlAlchemyPaymentRepository, SqlAlchemyFixedVirtualAccountRepository,
)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 (lifespan에서 만든 Database 사용)"""
    async with request.app.state.database.session() as session:
        yield session


def get_gateway(settings: Settings = Depends(get_settings)) -> Optional[PaymentGatewayPort]:
    """시크릿 키가 없으면 None (결제사 조회 단계에서 500으로 처리된다)"""
    if not settings.XENDIT_SECRET_KEY:
        return None
    return XenditGateway(
        secret_key=settings.XENDIT_SECRET_KEY,
        api_url=settings.XENDIT_API_URL,
        timeout=settings.XENDIT_TIMEOUT,
    )


def get_payment_use_case(
    session: AsyncSession = Depends(get_session),
    gateway: Optional[PaymentGatewayPort] = Depends(get_gateway),
) -> GetPaymentUseCase:
    return GetPaymentUseCase(
        payment_repo=SqlAlchemyPaymentRepository(session),
        order_repo=SqlAlchemyOrderRepository(session),
        gateway=gateway,
        va_repo=SqlAlchemyFixedVirtualAccountRepository(session),
    )


def get_callback_use_case(session: AsyncSession = Depends(get_session)) -> HandleCallbackUseCase:
    return HandleCallbackUseCase(
        order_repo=SqlAlchemyOrderRepository(session),
        projector=PaymentProjector(SqlAlchemyPaymentRepository(session)),
    )


def get_invoice_details_use_case(
    gateway: Optional[PaymentGatewayPort] = Depends(get_gateway),
) -> GetInvoiceDetailsUseCase:
    return GetInvoiceDetailsUseCase(gateway=gateway)
