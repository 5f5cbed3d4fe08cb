"""
FlavorSwipe 크레딧 / 결제 API - FastAPI 메인 애플리케이션
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from config import settings
from infrastructure.persistence.database import init_db
from infrastructure.ai.recipe_generator import build_recipe_generator
from api.exception_handlers import register_exception_handlers
from api.routers import payment, recipes, health

# 로깅 설정
os.makedirs(os.path.dirname(settings.LOG_FILE) or ".", exist_ok=True)
logger.add(
    settings.LOG_FILE,
    rotation="10 MB",
    retention="30 days",
    level=settings.LOG_LEVEL
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 수명 주기 관리"""
    logger.info("서비스 시작...")
    await init_db()
    logger.info("데이터베이스 초기화 완료")
    app.state.recipe_generator = build_recipe_generator(settings)

    yield

    logger.info("서비스 종료...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="FlavorSwipe 영상 업로드 크레딧 판매 / Mollie 결제 정산",
    lifespan=lifespan
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(payment.router)
app.include_router(recipes.router)
app.include_router(health.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
