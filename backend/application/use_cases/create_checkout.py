"""크레딧 결제(체크아웃) 생성 유스케이스"""
import uuid
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from domain.entities.credit_package import CreditCatalog
from domain.entities.payment import PaymentEntity
from domain.enums import PaymentStatus
from domain.exceptions import PaymentPersistenceError
from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.payment_repository import PaymentRepository


@dataclass
class CreateCheckoutInput:
    user_id: str
    package_id: str
    redirect_url: str
    webhook_url: str


@dataclass
class CreateCheckoutOutput:
    payment_id: str
    gateway_payment_id: str
    checkout_url: str


class CreateCheckoutUseCase:
    """패키지 검증 → 원격 결제 생성 → pending 기록 저장"""

    def __init__(self, catalog: CreditCatalog, gateway: PaymentGatewayPort,
                 payment_repo: PaymentRepository, currency: str = "EUR"):
        self._catalog = catalog
        self._gateway = gateway
        self._payment_repo = payment_repo
        self._currency = currency

    async def execute(self, input: CreateCheckoutInput) -> CreateCheckoutOutput:
        # 1. 패키지 확인 (원격 호출 전)
        package = self._catalog.get(input.package_id)

        # 2. 원격 결제 생성
        checkout = await self._gateway.create_checkout(
            user_id=input.user_id, package=package,
            redirect_url=input.redirect_url, webhook_url=input.webhook_url,
        )

        # 3. 스냅샷 기록 + 확정 - 실패하면 원격 결제는 고아가 된다
        payment = PaymentEntity(
            id=str(uuid.uuid4()),
            user_id=input.user_id,
            package_id=package.id,
            amount=package.price,
            currency=self._currency,
            credits_purchased=package.credits,
            gateway_payment_id=checkout.gateway_payment_id,
            checkout_url=checkout.checkout_url,
            status=PaymentStatus.PENDING,
        )
        try:
            await self._payment_repo.insert(payment)
            await self._payment_repo.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"결제 기록 저장 실패 (원격 결제 고아): gateway_payment_id={checkout.gateway_payment_id} "
                f"user={input.user_id} package={package.id} - {e}"
            )
            raise PaymentPersistenceError(checkout.gateway_payment_id) from e

        logger.info(f"체크아웃 생성: {payment.id} ({checkout.gateway_payment_id}) - "
                    f"user={input.user_id} package={package.id} {package.price_value} {self._currency}")
        return CreateCheckoutOutput(payment_id=payment.id,
                                    gateway_payment_id=checkout.gateway_payment_id,
                                    checkout_url=checkout.checkout_url)
