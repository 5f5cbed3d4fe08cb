"""도메인 예외 → HTTP 응답 매핑"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from domain.exceptions import (
    DomainError, ConfigurationError, InvalidPackageError, GatewayUnavailableError,
    PaymentNotFoundError, PaymentPersistenceError, UserNotFoundError,
    InsufficientCreditsError, UnauthorizedError,
)

STATUS_BY_ERROR = {
    InvalidPackageError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    InsufficientCreditsError: status.HTTP_402_PAYMENT_REQUIRED,
    PaymentNotFoundError: status.HTTP_404_NOT_FOUND,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PaymentPersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    GatewayUnavailableError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: DomainError) -> int:
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        code = status_for(exc)
        if code >= 500:
            logger.error(f"{request.method} {request.url.path} 실패: {exc}")
        headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=code, content={"success": False, "error": str(exc)}, headers=headers)
