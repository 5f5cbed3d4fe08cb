"""사용자 도메인 엔티티"""
from dataclasses import dataclass
from typing import Optional

from domain.enums import UserRole


@dataclass(frozen=True)
class AuthenticatedUser:
    """ID 제공자가 검증한 요청 주체"""
    user_id: str
    role: UserRole = UserRole.USER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
