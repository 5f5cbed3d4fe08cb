"""결제 Repository - SQLAlchemy 구현"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import select, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.payment_repository import PaymentRepository
from domain.entities.payment import PaymentEntity
from domain.enums import PaymentStatus
from infrastructure.persistence.models.payment import Payment


def _to_entity(row: Payment) -> PaymentEntity:
    return PaymentEntity(
        id=row.id, user_id=row.user_id, package_id=row.package_id,
        amount=row.amount, currency=row.currency, credits_purchased=row.credits_purchased,
        gateway_payment_id=row.gateway_payment_id, checkout_url=row.checkout_url,
        status=PaymentStatus(row.status), created_at=row.created_at, updated_at=row.updated_at,
    )


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def insert(self, payment: PaymentEntity) -> None:
        self._session.add(Payment(
            id=payment.id, user_id=payment.user_id, package_id=payment.package_id,
            amount=payment.amount, currency=payment.currency,
            credits_purchased=payment.credits_purchased, status=payment.status,
            gateway_payment_id=payment.gateway_payment_id, checkout_url=payment.checkout_url,
            created_at=payment.created_at, updated_at=payment.updated_at,
        ))
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def update_status(self, gateway_payment_id: str, new_status: PaymentStatus) -> int:
        # compare-and-set: 종결 상태 행은 건드리지 않는다
        result = await self._session.execute(
            update(Payment)
            .where(Payment.gateway_payment_id == gateway_payment_id,
                   Payment.status == PaymentStatus.PENDING)
            .values(status=new_status, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def find_by_gateway_id(self, gateway_payment_id: str) -> Optional[PaymentEntity]:
        result = await self._session.execute(
            select(Payment).where(Payment.gateway_payment_id == gateway_payment_id)
            .execution_options(populate_existing=True))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def find_by_id(self, payment_id: str) -> Optional[PaymentEntity]:
        result = await self._session.execute(
            select(Payment).where(Payment.id == payment_id)
            .execution_options(populate_existing=True))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def list_by_user(self, user_id: str) -> List[PaymentEntity]:
        result = await self._session.execute(
            select(Payment).where(Payment.user_id == user_id)
            .order_by(desc(Payment.created_at), desc(Payment.id)))
        return [_to_entity(row) for row in result.scalars().all()]

    async def list_recent(self, limit: int = 50, user_id: Optional[str] = None,
                          status: Optional[PaymentStatus] = None) -> List[PaymentEntity]:
        """관리 도구용 조회"""
        query = select(Payment)
        if user_id:
            query = query.where(Payment.user_id == user_id)
        if status:
            query = query.where(Payment.status == status)
        result = await self._session.execute(query.order_by(desc(Payment.created_at)).limit(limit))
        return [_to_entity(row) for row in result.scalars().all()]
