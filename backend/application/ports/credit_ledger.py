"""크레딧 원장 인터페이스"""
from abc import ABC, abstractmethod

from domain.enums import UserRole


class CreditLedgerPort(ABC):
    @abstractmethod
    async def grant(self, user_id: str, amount: int) -> None: ...
    @abstractmethod
    async def spend(self, user_id: str) -> bool: ...
    @abstractmethod
    async def get(self, user_id: str) -> int: ...
    @abstractmethod
    async def ensure_profile(self, user_id: str, role: UserRole = UserRole.USER) -> None: ...
