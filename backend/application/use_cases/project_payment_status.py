"""결제 상태 투영: 주문 애그리거트 이벤트를 payments 테이블에 반영"""
from loguru import logger

from application.ports.payment_repository import PaymentRepository
from domain.entities.transaction import PaymentStatusChanged
from domain.enums import ORDER_TO_PAYMENT_STATUS


class PaymentProjector:
    """payments 테이블은 이 클래스를 통해서만 상태가 바뀐다"""

    def __init__(self, payment_repo: PaymentRepository):
        self._payment_repo = payment_repo

    async def project(self, event: PaymentStatusChanged) -> int:
        status = ORDER_TO_PAYMENT_STATUS[event.current]
        updated = await self._payment_repo.apply_projection(
            xendit_id=event.invoice_id,
            external_id=event.external_id,
            status=status,
            paid_at=event.paid_at,
        )
        if updated:
            logger.info(f"[투영] 주문 {event.order_id}: payments {updated}건 -> {status}")
        else:
            logger.debug(f"[투영] 주문 {event.order_id}: 대응하는 payments 행 없음")
        return updated
