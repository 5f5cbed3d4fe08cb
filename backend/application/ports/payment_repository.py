"""결제 Repository 인터페이스"""
from abc import ABC, abstractmethod
from typing import Optional, List

from domain.entities.payment import PaymentEntity
from domain.enums import PaymentStatus


class PaymentRepository(ABC):
    @abstractmethod
    async def insert(self, payment: PaymentEntity) -> None: ...
    @abstractmethod
    async def commit(self) -> None:
        """지금까지의 변경을 확정. 실패하면 저장소 예외를 그대로 올린다."""
    @abstractmethod
    async def update_status(self, gateway_payment_id: str, new_status: PaymentStatus) -> int:
        """pending 인 행만 전이. 이번 호출이 전이했으면 1, 아니면 0."""
    @abstractmethod
    async def find_by_gateway_id(self, gateway_payment_id: str) -> Optional[PaymentEntity]: ...
    @abstractmethod
    async def find_by_id(self, payment_id: str) -> Optional[PaymentEntity]: ...
    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[PaymentEntity]: ...
