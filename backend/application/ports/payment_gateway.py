"""결제 게이트웨이 포트"""
from abc import ABC, abstractmethod
from dataclasses import dataclass

from domain.entities.credit_package import CreditPackage


@dataclass(frozen=True)
class CheckoutSession:
    gateway_payment_id: str
    checkout_url: str


class PaymentGatewayPort(ABC):
    @abstractmethod
    async def create_checkout(self, user_id: str, package: CreditPackage,
                              redirect_url: str, webhook_url: str) -> CheckoutSession: ...
    @abstractmethod
    async def get_status(self, gateway_payment_id: str) -> str: ...
