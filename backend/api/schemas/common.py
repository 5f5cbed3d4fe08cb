"""공통 응답 스키마"""
from typing import Optional
from pydantic import BaseModel


class ResponseBase(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """DomainError 응답 본문 (api.exception_handlers)"""
    success: bool = False
    error: str


def error_responses(*codes: int) -> dict:
    """라우터 responses= 문서화용"""
    return {code: {"model": ErrorResponse} for code in codes}
