"""결제 / 크레딧 라우터"""
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from domain.entities.credit_package import CreditCatalog
from domain.entities.user import AuthenticatedUser
from domain.enums import PaymentStatus
from domain.exceptions import DomainError, InsufficientCreditsError
from application.ports.credit_ledger import CreditLedgerPort
from application.ports.payment_repository import PaymentRepository
from application.use_cases.create_checkout import CreateCheckoutUseCase, CreateCheckoutInput
from application.use_cases.confirm_payment import ConfirmPaymentUseCase
from application.use_cases.handle_webhook import HandleWebhookUseCase
from application.use_cases.observe_payment import ObserveResult
from api.schemas.common import error_responses
from api.schemas.payment import (
    PackageInfo, PackagesResponse, CheckoutRequest, CheckoutResponse, CreditsResponse,
    SpendResponse, ConfirmRequest, ConfirmResponse, PaymentHistoryItem, PaymentHistoryResponse,
)
from api.dependencies import (
    get_catalog, get_current_user, get_credit_ledger, get_payment_repository,
    get_create_checkout_use_case, get_confirm_use_case, get_webhook_use_case,
)
from infrastructure.persistence.database import get_session

router = APIRouter(prefix="/api/payments", tags=["결제"])


@router.get("/packages", response_model=PackagesResponse)
async def get_packages(catalog: CreditCatalog = Depends(get_catalog)):
    return PackagesResponse(packages={
        p.id: PackageInfo(credits=p.credits, price=p.price, description=p.description)
        for p in catalog.all()
    })


@router.post("/checkout", response_model=CheckoutResponse, responses=error_responses(400, 401, 500, 502))
async def create_checkout(request: CheckoutRequest,
                          current_user: AuthenticatedUser = Depends(get_current_user),
                          use_case: CreateCheckoutUseCase = Depends(get_create_checkout_use_case)):
    result = await use_case.execute(CreateCheckoutInput(
        user_id=current_user.user_id, package_id=request.package_id,
        redirect_url=settings.checkout_redirect_url, webhook_url=settings.payment_webhook_url,
    ))
    return CheckoutResponse(checkout_url=result.checkout_url, payment_id=result.payment_id,
                            gateway_payment_id=result.gateway_payment_id)


@router.get("/credits", response_model=CreditsResponse)
async def get_credits(current_user: AuthenticatedUser = Depends(get_current_user),
                      ledger: CreditLedgerPort = Depends(get_credit_ledger)):
    return CreditsResponse(credits=await ledger.get(current_user.user_id))


@router.post("/credits/spend", response_model=SpendResponse, responses=error_responses(401, 402))
async def spend_credit(current_user: AuthenticatedUser = Depends(get_current_user),
                       ledger: CreditLedgerPort = Depends(get_credit_ledger)):
    """영상 업로드 1건에 크레딧 1 차감"""
    if not await ledger.spend(current_user.user_id):
        raise InsufficientCreditsError()
    remaining = await ledger.get(current_user.user_id)
    logger.info(f"크레딧 사용: user {current_user.user_id} (잔액 {remaining})")
    return SpendResponse(success=True, credits=remaining)


@router.get("/history", response_model=PaymentHistoryResponse)
async def get_payment_history(current_user: AuthenticatedUser = Depends(get_current_user),
                              payment_repo: PaymentRepository = Depends(get_payment_repository)):
    payments = await payment_repo.list_by_user(current_user.user_id)
    items = [PaymentHistoryItem(id=p.id, user_id=p.user_id, package_id=p.package_id, amount=p.amount,
                                currency=p.currency, credits_purchased=p.credits_purchased,
                                status=p.status.value, gateway_payment_id=p.gateway_payment_id,
                                checkout_url=p.checkout_url, created_at=p.created_at,
                                updated_at=p.updated_at)
             for p in payments]
    return PaymentHistoryResponse(payments=items)


def _confirm_response(result: ObserveResult) -> ConfirmResponse:
    if result.status == PaymentStatus.PAID:
        message = "크레딧이 지급되었습니다." if result.credited else "이미 처리된 결제입니다."
    else:
        message = f"결제 상태: {result.status.value}"
    return ConfirmResponse(success=result.status == PaymentStatus.PAID, message=message,
                           status=result.status.value, outcome=result.outcome.value,
                           credits=result.credits_granted)


@router.post("/confirm/{payment_id}", response_model=ConfirmResponse, responses=error_responses(404, 502))
async def confirm_payment(payment_id: str,
                          use_case: ConfirmPaymentUseCase = Depends(get_confirm_use_case)):
    """수동 확인 (웹훅이 닿지 않는 환경용)"""
    return _confirm_response(await use_case.execute(payment_id=payment_id))


@router.post("/confirm", response_model=ConfirmResponse, responses=error_responses(404, 502))
async def confirm_payment_by_body(request: ConfirmRequest,
                                  use_case: ConfirmPaymentUseCase = Depends(get_confirm_use_case)):
    return _confirm_response(await use_case.execute(payment_id=request.payment_id,
                                                    gateway_payment_id=request.gateway_payment_id))


async def _read_webhook_payload(request: Request) -> dict:
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            data = await request.json()
            return data if isinstance(data, dict) else {}
        return dict(await request.form())
    except ValueError:
        return {}


@router.post("/webhook")
async def handle_webhook(request: Request,
                         session: AsyncSession = Depends(get_session),
                         use_case: HandleWebhookUseCase = Depends(get_webhook_use_case)):
    """Mollie 웹훅 (인증 없음). 처리/종결/미확인은 200, 내부 실패는 500."""
    payload = await _read_webhook_payload(request)
    gateway_payment_id: Optional[str] = payload.get("id") or payload.get("gatewayPaymentId")
    if not gateway_payment_id:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={"error": "Missing payment ID"})

    try:
        await use_case.execute(str(gateway_payment_id))
    except DomainError as e:
        # 내부 메시지는 노출하지 않는다
        await session.rollback()
        logger.error(f"웹훅 처리 실패: {gateway_payment_id} - {e}")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={"error": "Webhook processing failed"})
    return PlainTextResponse("OK")
