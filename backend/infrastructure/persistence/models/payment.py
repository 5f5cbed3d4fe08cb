"""결제 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Numeric, Enum, Index
from infrastructure.persistence.database import Base
from domain.enums import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"
    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    package_id = Column(String(32), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")
    credits_purchased = Column(Integer, nullable=False)
    status = Column(Enum(PaymentStatus, values_callable=lambda e: [m.value for m in e],
                         native_enum=False, length=16),
                    default=PaymentStatus.PENDING, nullable=False)
    gateway_payment_id = Column(String(100), unique=True, nullable=False)
    checkout_url = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_payments_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<Payment {self.gateway_payment_id} - {self.amount} {self.currency} ({self.status})>"
