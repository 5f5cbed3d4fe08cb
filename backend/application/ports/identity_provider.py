"""ID 제공자 포트"""
from abc import ABC, abstractmethod

from domain.entities.user import AuthenticatedUser


class IdentityProviderPort(ABC):
    @abstractmethod
    def verify_token(self, bearer_token: str) -> AuthenticatedUser:
        """검증 실패 시 UnauthorizedError"""
