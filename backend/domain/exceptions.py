"""도메인 예외"""


class DomainError(Exception):
    """도메인 레이어 기본 예외"""
    pass


class ConfigurationError(DomainError):
    def __init__(self, what: str):
        super().__init__(f"설정이 누락되었습니다: {what}")


class InvalidPackageError(DomainError):
    def __init__(self, package_id: str):
        self.package_id = package_id
        super().__init__(f"유효하지 않은 크레딧 패키지입니다: {package_id}")


class GatewayUnavailableError(DomainError):
    def __init__(self, detail: str):
        super().__init__(f"결제 게이트웨이 호출 실패: {detail}")


class PaymentNotFoundError(DomainError):
    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(f"결제를 찾을 수 없습니다: {payment_id}")


class PaymentPersistenceError(DomainError):
    """원격 결제는 생성됐지만 로컬 기록 저장에 실패 (재조정 불가 구간)"""

    def __init__(self, gateway_payment_id: str):
        self.gateway_payment_id = gateway_payment_id
        super().__init__(f"결제 기록 저장 실패: {gateway_payment_id}")


class UserNotFoundError(DomainError):
    def __init__(self, user_id: str = ""):
        super().__init__("사용자를 찾을 수 없습니다." if not user_id else f"사용자를 찾을 수 없습니다: {user_id}")


class InsufficientCreditsError(DomainError):
    def __init__(self):
        super().__init__("크레딧이 부족합니다.")


class UnauthorizedError(DomainError):
    def __init__(self, detail: str = "유효하지 않은 인증 정보입니다."):
        super().__init__(detail)
