"""크레딧 원장 - profiles.video_credits 의 유일한 소유자

모든 증감은 단일 UPDATE 문(원자적 read-modify-write)으로 처리한다.
"""
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from application.ports.credit_ledger import CreditLedgerPort
from domain.enums import UserRole
from domain.exceptions import UserNotFoundError
from infrastructure.persistence.models.profile import Profile


class SqlAlchemyCreditLedger(CreditLedgerPort):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def grant(self, user_id: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError("지급 크레딧은 양수여야 합니다.")
        result = await self._session.execute(
            update(Profile)
            .where(Profile.id == user_id)
            .values(video_credits=Profile.video_credits + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise UserNotFoundError(user_id)

    async def spend(self, user_id: str) -> bool:
        result = await self._session.execute(
            update(Profile)
            .where(Profile.id == user_id, Profile.video_credits > 0)
            .values(video_credits=Profile.video_credits - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def get(self, user_id: str) -> int:
        result = await self._session.execute(
            select(Profile.video_credits).where(Profile.id == user_id))
        credits = result.scalar_one_or_none()
        if credits is None:
            raise UserNotFoundError(user_id)
        return credits

    async def ensure_profile(self, user_id: str, role: UserRole = UserRole.USER) -> None:
        result = await self._session.execute(select(Profile.id).where(Profile.id == user_id))
        if result.scalar_one_or_none() is not None:
            return
        self._session.add(Profile(id=user_id, role=role, video_credits=0))
        try:
            await self._session.flush()
            logger.info(f"새 프로필 생성: {user_id}")
        except IntegrityError:
            # 동시 요청이 먼저 만든 경우
            await self._session.rollback()
