"""
ORM 모델 - 모든 모델을 re-export
"""
from infrastructure.persistence.database import Base
from infrastructure.persistence.models.payment import Payment
from infrastructure.persistence.models.profile import Profile
from domain.enums import UserRole, PaymentStatus
