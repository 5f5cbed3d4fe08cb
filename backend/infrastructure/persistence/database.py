"""
데이터베이스 연결 및 세션 관리

사용법: from infrastructure.persistence.database import Base, get_session
"""
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base

from config import settings

Base = declarative_base()


def build_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """SQLite 는 풀 크기 옵션을 받지 않으므로 분기"""
    if db_url.startswith("sqlite"):
        path = db_url.split("///", 1)[-1]
        if path and path != ":memory:":
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        return create_async_engine(db_url, echo=echo, future=True)
    return create_async_engine(
        db_url,
        echo=echo,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.DB_URL, echo=settings.DEBUG)
async_session_factory = build_session_factory(engine)


async def init_db(bind: AsyncEngine = None):
    """데이터베이스 초기화"""
    import infrastructure.persistence.models  # noqa: F401  테이블 등록

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """비동기 세션 의존성 - 요청 하나가 트랜잭션 하나"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_session():
    """컨텍스트 매니저 형태의 세션"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
