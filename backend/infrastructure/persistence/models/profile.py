"""프로필(크레딧 잔액) ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum, CheckConstraint
from infrastructure.persistence.database import Base
from domain.enums import UserRole


class Profile(Base):
    __tablename__ = "profiles"
    id = Column(String(64), primary_key=True)  # ID 제공자의 user id
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e],
                       native_enum=False, length=16),
                  default=UserRole.USER, nullable=False)
    video_credits = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("video_credits >= 0", name="ck_profiles_credits_non_negative"),
    )

    def __repr__(self):
        return f"<Profile {self.id} - {self.video_credits} credits>"
