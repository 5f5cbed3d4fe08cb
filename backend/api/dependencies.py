"""
FastAPI 의존성 주입 (Depends)

외부 클라이언트(게이트웨이, ID 제공자, 저장소)는 전역 싱글톤이 아니라
여기서 요청마다 조립해 유스케이스에 넘긴다. 테스트는 app.dependency_overrides 로 교체한다.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from domain.entities.credit_package import CreditCatalog
from domain.entities.user import AuthenticatedUser
from domain.exceptions import UnauthorizedError
from application.ports.credit_ledger import CreditLedgerPort
from application.ports.identity_provider import IdentityProviderPort
from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.payment_repository import PaymentRepository
from application.ports.recipe_generator import RecipeGeneratorPort
from application.use_cases.create_checkout import CreateCheckoutUseCase
from application.use_cases.observe_payment import ObservePaymentUseCase
from application.use_cases.confirm_payment import ConfirmPaymentUseCase
from application.use_cases.handle_webhook import HandleWebhookUseCase
from infrastructure.auth.jwt_service import SupabaseIdentityProvider
from infrastructure.payment.mollie_gateway import MollieGateway
from infrastructure.persistence.database import get_session
from infrastructure.persistence.repositories import SqlAlchemyPaymentRepository, SqlAlchemyCreditLedger

security = HTTPBearer(auto_error=False)


@lru_cache()
def get_catalog() -> CreditCatalog:
    return CreditCatalog.from_config(settings.CREDIT_PACKAGES)


def get_payment_gateway() -> PaymentGatewayPort:
    return MollieGateway(api_key=settings.MOLLIE_API_KEY, api_url=settings.MOLLIE_API_URL,
                         timeout=settings.MOLLIE_TIMEOUT, currency=settings.PAYMENT_CURRENCY)


def get_identity_provider() -> IdentityProviderPort:
    return SupabaseIdentityProvider(settings.SUPABASE_JWT_SECRET, settings.JWT_ALGORITHM,
                                    settings.JWT_AUDIENCE)


def get_recipe_generator(request: Request) -> RecipeGeneratorPort:
    return request.app.state.recipe_generator


def get_payment_repository(session: AsyncSession = Depends(get_session)) -> PaymentRepository:
    return SqlAlchemyPaymentRepository(session)


def get_credit_ledger(session: AsyncSession = Depends(get_session)) -> CreditLedgerPort:
    return SqlAlchemyCreditLedger(session)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity: IdentityProviderPort = Depends(get_identity_provider),
    ledger: CreditLedgerPort = Depends(get_credit_ledger),
) -> AuthenticatedUser:
    """현재 인증된 사용자 반환 - 첫 요청 시 잔액 0 프로필 생성"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("인증 헤더가 없습니다.")
    user = identity.verify_token(credentials.credentials)
    await ledger.ensure_profile(user.user_id, user.role)
    return user


def get_observe_use_case(
    payment_repo: PaymentRepository = Depends(get_payment_repository),
    ledger: CreditLedgerPort = Depends(get_credit_ledger),
) -> ObservePaymentUseCase:
    return ObservePaymentUseCase(payment_repo, ledger)


def get_create_checkout_use_case(
    catalog: CreditCatalog = Depends(get_catalog),
    gateway: PaymentGatewayPort = Depends(get_payment_gateway),
    payment_repo: PaymentRepository = Depends(get_payment_repository),
) -> CreateCheckoutUseCase:
    return CreateCheckoutUseCase(catalog, gateway, payment_repo, currency=settings.PAYMENT_CURRENCY)


def get_confirm_use_case(
    payment_repo: PaymentRepository = Depends(get_payment_repository),
    gateway: PaymentGatewayPort = Depends(get_payment_gateway),
    observe: ObservePaymentUseCase = Depends(get_observe_use_case),
) -> ConfirmPaymentUseCase:
    return ConfirmPaymentUseCase(payment_repo, gateway, observe)


def get_webhook_use_case(
    gateway: PaymentGatewayPort = Depends(get_payment_gateway),
    observe: ObservePaymentUseCase = Depends(get_observe_use_case),
) -> HandleWebhookUseCase:
    return HandleWebhookUseCase(gateway, observe)
