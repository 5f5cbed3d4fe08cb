"""결제 도메인 엔티티"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from domain.enums import PaymentStatus

# Mollie 상태 → 로컬 상태. 목록에 없는 값은 pending 유지.
PROVIDER_STATUS_MAP = {
    "paid": PaymentStatus.PAID,
    "failed": PaymentStatus.FAILED,
    "expired": PaymentStatus.EXPIRED,
    "canceled": PaymentStatus.CANCELED,
    "cancelled": PaymentStatus.CANCELED,
    "open": PaymentStatus.PENDING,
    "pending": PaymentStatus.PENDING,
    "authorized": PaymentStatus.PENDING,
}


def map_provider_status(provider_status: Optional[str]) -> PaymentStatus:
    if not provider_status:
        return PaymentStatus.PENDING
    return PROVIDER_STATUS_MAP.get(provider_status.strip().lower(), PaymentStatus.PENDING)


@dataclass
class PaymentEntity:
    """결제 시도 1건 - 금액/크레딧은 생성 시점 패키지의 스냅샷"""
    id: str
    user_id: str
    package_id: str
    amount: Decimal
    currency: str
    credits_purchased: int
    gateway_payment_id: str
    checkout_url: str
    status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
