"""Xendit 결제 조회/콜백 라우터"""
import hmac
from typing import Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query, Response, status
from loguru import logger

from config import Settings, get_settings
from api.dependencies import get_payment_use_case, get_callback_use_case, get_invoice_details_use_case
from api.schemas.common import ErrorResponse
from api.schemas.payment import PaymentResponse, InvoiceDetailsResponse, CallbackResponse
from application.use_cases.get_invoice_details import GetInvoiceDetailsUseCase
from application.use_cases.get_payment import GetPaymentUseCase
from application.use_cases.handle_callback import HandleCallbackUseCase
from domain.exceptions import (
    PaymentNotFoundError, PaymentLookupUnavailableError, ProviderConfigurationError,
    RecordStoreError, InvalidCallbackError,
)

router = APIRouter(prefix="/api/xendit", tags=["결제"])

CACHE_CONTROL = "private, max-age=30, stale-while-revalidate=60"


@router.get("/get-payment", response_model=PaymentResponse, response_model_exclude_none=True,
            responses={code: {"model": ErrorResponse} for code in (400, 404, 500, 503)})
async def get_payment(
    response: Response,
    id: Optional[str] = Query(None, description="Xendit 결제/인보이스 ID"),
    use_case: GetPaymentUseCase = Depends(get_payment_use_case),
):
    """결제 상태 조회 (payments -> orders -> Payment Request API -> Invoice API)"""
    payment_id = (id or "").strip()
    if not payment_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="결제 ID가 필요합니다.")

    try:
        payment = await use_case.execute(payment_id)
    except PaymentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="결제 정보를 찾을 수 없습니다.")
    except PaymentLookupUnavailableError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="결제사 조회에 실패해 결제 상태를 확인할 수 없습니다.")
    except ProviderConfigurationError as e:
        logger.error(f"[결제 조회] {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="결제 게이트웨이 설정 오류")
    except RecordStoreError as e:
        logger.error(f"[결제 조회] {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="데이터베이스 오류")

    response.headers["Cache-Control"] = CACHE_CONTROL
    return payment.to_dict()


@router.get("/get-invoice-details", response_model=InvoiceDetailsResponse, response_model_exclude_none=True,
            responses={code: {"model": ErrorResponse} for code in (400, 404, 500, 503)})
async def get_invoice_details(
    invoice_id: Optional[str] = Query(None, description="Xendit 인보이스 ID"),
    use_case: GetInvoiceDetailsUseCase = Depends(get_invoice_details_use_case),
):
    """인보이스 상세 조회 (Invoice API 직접 조회, 가상계좌 정보 포함)"""
    invoice_id = (invoice_id or "").strip()
    if not invoice_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="인보이스 ID가 필요합니다.")

    try:
        details = await use_case.execute(invoice_id)
    except PaymentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="인보이스를 찾을 수 없습니다.")
    except PaymentLookupUnavailableError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail="결제사 조회에 실패해 인보이스를 확인할 수 없습니다.")
    except ProviderConfigurationError as e:
        logger.error(f"[인보이스 조회] {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="결제 게이트웨이 설정 오류")

    return details.to_dict()


@router.post("/webhook", response_model=CallbackResponse,
             responses={code: {"model": ErrorResponse} for code in (400, 401, 500)})
async def xendit_webhook(
    payload: dict = Body(...),
    x_callback_token: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    use_case: HandleCallbackUseCase = Depends(get_callback_use_case),
):
    """Xendit 콜백 수신: 주문 상태 전이 후 payments 투영"""
    expected = settings.XENDIT_CALLBACK_TOKEN
    if expected and not hmac.compare_digest(x_callback_token or "", expected):
        logger.warning("[콜백] 콜백 토큰 불일치")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="유효하지 않은 콜백 토큰입니다.")

    try:
        result = await use_case.execute(payload)
    except InvalidCallbackError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except RecordStoreError as e:
        logger.error(f"[콜백] {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="데이터베이스 오류")

    return CallbackResponse(ok=True, updated=result.updated, by=result.matched_by, status=result.status)
