"""도메인 열거형"""
import enum


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    EXPIRED = "expired"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


class ObserveOutcome(str, enum.Enum):
    """상태 관찰(Observe) 결과 - 예외가 아니라 로깅/응답 구분용"""
    CREDITED = "credited"                  # 이번 호출이 paid 전이 + 크레딧 지급
    TRANSITIONED = "transitioned"          # 이번 호출이 failed/expired/canceled 전이
    ALREADY_TERMINAL = "already_terminal"  # 이미 종결 상태, 아무 것도 안 함
    STILL_PENDING = "still_pending"        # 게이트웨이가 아직 진행 중
