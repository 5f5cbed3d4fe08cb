"""결제 웹훅 처리 유스케이스"""
from typing import Optional

from loguru import logger

from domain.exceptions import PaymentNotFoundError
from application.ports.payment_gateway import PaymentGatewayPort
from application.use_cases.observe_payment import ObservePaymentUseCase, ObserveResult


class HandleWebhookUseCase:
    """웹훅은 결제 id 만 믿는다. 상태는 항상 게이트웨이에서 다시 조회한다.

    게이트웨이나 로컬 저장소가 모르는 결제는 None 을 반환한다 (재전송 불필요).
    """

    def __init__(self, gateway: PaymentGatewayPort, observe: ObservePaymentUseCase):
        self._gateway = gateway
        self._observe = observe

    async def execute(self, gateway_payment_id: str) -> Optional[ObserveResult]:
        try:
            provider_status = await self._gateway.get_status(gateway_payment_id)
            result = await self._observe.execute(gateway_payment_id, provider_status)
        except PaymentNotFoundError:
            logger.warning(f"알 수 없는 결제 웹훅 무시: {gateway_payment_id}")
            return None
        logger.info(f"웹훅 처리: {gateway_payment_id} - {result.outcome.value}")
        return result
