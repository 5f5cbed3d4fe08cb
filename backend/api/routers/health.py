"""헬스 체크 라우터"""
from fastapi import APIRouter, Request
from sqlalchemy import text
from loguru import logger

from config import settings
from infrastructure.persistence.database import async_session_factory

router = APIRouter(tags=["시스템"])


@router.get("/health")
async def health_check(request: Request):
    db_ok = True
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"DB 헬스 체크 실패: {e}")
        db_ok = False

    generator = getattr(request.app.state, "recipe_generator", None)
    return {
        "status": "healthy" if db_ok else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": db_ok,
        "payments_configured": bool(settings.MOLLIE_API_KEY),
        "recipe_generator": type(generator).__name__ if generator else None,
    }


@router.get("/")
async def root():
    return {"service": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs", "health": "/health"}
