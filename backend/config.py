"""
FlavorSwipe 크레딧 백엔드 설정
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 앱 기본 설정
    APP_NAME: str = "FlavorSwipe Credits API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # 데이터베이스 설정
    DB_URL: str = "sqlite+aiosqlite:///./data/flavorswipe.db"

    # Supabase 토큰 검증
    SUPABASE_JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Mollie 설정 (키가 비어 있으면 결제 생성 시점에 ConfigurationError)
    MOLLIE_API_KEY: str = ""
    MOLLIE_API_URL: str = "https://api.mollie.com/v2"
    MOLLIE_TIMEOUT: float = 10.0  # 초

    # 크레딧 패키지 (배포 시점 고정)
    PAYMENT_CURRENCY: str = "EUR"
    CREDIT_PACKAGES: dict = {
        "1": {"credits": 1, "price": "1.50", "description": "1 video upload"},
        "3": {"credits": 3, "price": "4.00", "description": "3 video uploads"},
        "10": {"credits": 10, "price": "12.50", "description": "10 video uploads"},
    }

    # 리다이렉트 / 웹훅 URL
    FRONTEND_URL: str = "http://localhost:5173"
    PUBLIC_API_URL: Optional[str] = None  # 없으면 FRONTEND_URL에서 유도

    # 레시피 생성 (LLM)
    LOVABLE_API_KEY: str = ""
    OPENAI_API_KEY: str = ""
    AI_TIMEOUT: float = 30.0

    # CORS 설정
    CORS_ORIGINS: list = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env.backend"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def api_base_url(self) -> str:
        if self.PUBLIC_API_URL:
            return self.PUBLIC_API_URL.rstrip("/")
        return self.FRONTEND_URL.replace("5173", "3000").rstrip("/")

    @property
    def checkout_redirect_url(self) -> str:
        return f"{self.FRONTEND_URL.rstrip('/')}/dashboard?payment=success"

    @property
    def payment_webhook_url(self) -> str:
        return f"{self.api_base_url}/api/payments/webhook"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


# 설정 인스턴스
settings = get_settings()
