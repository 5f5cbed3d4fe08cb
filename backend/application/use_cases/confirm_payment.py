"""수동 결제 확인 유스케이스 - 클라이언트가 보낸 상태는 믿지 않고 게이트웨이에 재조회"""
from typing import Optional

from domain.exceptions import PaymentNotFoundError
from application.ports.payment_gateway import PaymentGatewayPort
from application.ports.payment_repository import PaymentRepository
from application.use_cases.observe_payment import ObservePaymentUseCase, ObserveResult


class ConfirmPaymentUseCase:
    def __init__(self, payment_repo: PaymentRepository, gateway: PaymentGatewayPort,
                 observe: ObservePaymentUseCase):
        self._payment_repo = payment_repo
        self._gateway = gateway
        self._observe = observe

    async def execute(self, payment_id: Optional[str] = None,
                      gateway_payment_id: Optional[str] = None) -> ObserveResult:
        gateway_id = await self._resolve_gateway_id(payment_id, gateway_payment_id)
        provider_status = await self._gateway.get_status(gateway_id)
        return await self._observe.execute(gateway_id, provider_status)

    async def _resolve_gateway_id(self, payment_id: Optional[str],
                                  gateway_payment_id: Optional[str]) -> str:
        if gateway_payment_id:
            payment = await self._payment_repo.find_by_gateway_id(gateway_payment_id)
        elif payment_id:
            # 경로 파라미터는 로컬 ID 일 수도, 게이트웨이 ID 일 수도 있다
            payment = await self._payment_repo.find_by_id(payment_id)
            if payment is None:
                payment = await self._payment_repo.find_by_gateway_id(payment_id)
        else:
            payment = None
        if payment is None:
            raise PaymentNotFoundError(gateway_payment_id or payment_id or "")
        return payment.gateway_payment_id
