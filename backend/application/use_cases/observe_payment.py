"""결제 상태 관찰 유스케이스 - 웹훅/수동 확인이 공유하는 단일 진입점

조건부 상태 전이(pending 일 때만)가 1행을 바꾼 호출만 크레딧을 지급한다.
같은 결제에 대해 몇 번을, 어떤 순서로, 동시에 호출해도 지급은 한 번뿐이다.
"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from domain.entities.payment import map_provider_status
from domain.enums import PaymentStatus, ObserveOutcome
from domain.exceptions import PaymentNotFoundError
from application.ports.payment_repository import PaymentRepository
from application.ports.credit_ledger import CreditLedgerPort


@dataclass
class ObserveResult:
    outcome: ObserveOutcome
    status: PaymentStatus
    payment_id: str
    credits_granted: int = 0
    provider_status: Optional[str] = None

    @property
    def credited(self) -> bool:
        return self.outcome == ObserveOutcome.CREDITED


class ObservePaymentUseCase:
    def __init__(self, payment_repo: PaymentRepository, credit_ledger: CreditLedgerPort):
        self._payment_repo = payment_repo
        self._ledger = credit_ledger

    async def execute(self, gateway_payment_id: str, provider_status: Optional[str]) -> ObserveResult:
        target = map_provider_status(provider_status)

        if target is PaymentStatus.PENDING:
            payment = await self._require(gateway_payment_id, provider_status)
            outcome = ObserveOutcome.ALREADY_TERMINAL if payment.is_terminal else ObserveOutcome.STILL_PENDING
            return ObserveResult(outcome=outcome, status=payment.status, payment_id=payment.id,
                                 provider_status=provider_status)

        # 조건부 쓰기: pending → target
        affected = await self._payment_repo.update_status(gateway_payment_id, target)
        payment = await self._require(gateway_payment_id, provider_status)

        if affected == 0:
            if payment.status != target:
                logger.warning(f"종결 상태 충돌 무시: {gateway_payment_id} 현재={payment.status.value} "
                               f"관찰={provider_status}")
            else:
                logger.info(f"이미 종결된 결제: {gateway_payment_id} ({payment.status.value})")
            return ObserveResult(outcome=ObserveOutcome.ALREADY_TERMINAL, status=payment.status,
                                 payment_id=payment.id, provider_status=provider_status)

        if target is PaymentStatus.PAID:
            await self._ledger.grant(payment.user_id, payment.credits_purchased)
            logger.info(f"크레딧 지급: {payment.credits_purchased} → user {payment.user_id} "
                        f"({gateway_payment_id})")
            return ObserveResult(outcome=ObserveOutcome.CREDITED, status=target, payment_id=payment.id,
                                 credits_granted=payment.credits_purchased, provider_status=provider_status)

        logger.info(f"결제 종결: {gateway_payment_id} → {target.value}")
        return ObserveResult(outcome=ObserveOutcome.TRANSITIONED, status=target, payment_id=payment.id,
                             provider_status=provider_status)

    async def _require(self, gateway_payment_id: str, provider_status: Optional[str]):
        payment = await self._payment_repo.find_by_gateway_id(gateway_payment_id)
        if payment is None:
            logger.error(f"로컬 기록 없는 결제 관찰: {gateway_payment_id} (provider status={provider_status})")
            raise PaymentNotFoundError(gateway_payment_id)
        return payment
