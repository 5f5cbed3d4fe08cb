"""공용 테스트 픽스처

- DB: 테스트마다 새 in-memory SQLite (StaticPool 로 세션 간 연결 공유)
- 게이트웨이: FakeGateway (원격 호출 없음)
- HTTP: httpx.AsyncClient(transport=ASGITransport(app=app))
"""
import os
import tempfile
from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional

# config 를 import 하기 전에 테스트 환경을 고정한다
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "flavorswipe-test.log"))

import httpx
import pytest
from httpx import ASGITransport
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool

from application.ports.payment_gateway import PaymentGatewayPort, CheckoutSession
from domain.entities.credit_package import CreditCatalog, CreditPackage
from domain.entities.payment import PaymentEntity
from domain.enums import PaymentStatus, UserRole
from domain.exceptions import PaymentNotFoundError
from infrastructure.auth.jwt_service import SupabaseIdentityProvider
from infrastructure.ai.recipe_generator import FallbackRecipeGenerator
from infrastructure.persistence.database import build_session_factory, init_db
from infrastructure.persistence.repositories import SqlAlchemyCreditLedger

TEST_JWT_SECRET = "test-jwt-secret"

TEST_PACKAGES = {
    "1": {"credits": 1, "price": "1.50", "description": "1 video upload"},
    "3": {"credits": 3, "price": "4.00", "description": "3 video uploads"},
    "10": {"credits": 10, "price": "12.50", "description": "10 video uploads"},
}


class FakeGateway(PaymentGatewayPort):
    """원격 결제 상태를 메모리에 두는 게이트웨이 대역"""

    def __init__(self, ids: Optional[List[str]] = None):
        self.statuses: Dict[str, str] = {}
        self.created: List[dict] = []
        self.status_calls: List[str] = []
        self._ids = list(ids or [])
        self._seq = 0

    async def create_checkout(self, user_id: str, package: CreditPackage,
                              redirect_url: str, webhook_url: str) -> CheckoutSession:
        self._seq += 1
        gateway_payment_id = self._ids.pop(0) if self._ids else f"tr_test{self._seq}"
        self.created.append({"user_id": user_id, "package_id": package.id,
                             "redirect_url": redirect_url, "webhook_url": webhook_url})
        self.statuses[gateway_payment_id] = "open"
        return CheckoutSession(gateway_payment_id=gateway_payment_id,
                               checkout_url=f"https://checkout.test/{gateway_payment_id}")

    async def get_status(self, gateway_payment_id: str) -> str:
        self.status_calls.append(gateway_payment_id)
        if gateway_payment_id not in self.statuses:
            raise PaymentNotFoundError(gateway_payment_id)
        return self.statuses[gateway_payment_id]


def make_payment(**kwargs) -> PaymentEntity:
    gateway_payment_id = kwargs.get("gateway_payment_id", "tr_abc")
    return PaymentEntity(
        id=kwargs.get("id", f"local-{gateway_payment_id}"),
        user_id=kwargs.get("user_id", "user-1"),
        package_id=kwargs.get("package_id", "10"),
        amount=kwargs.get("amount", Decimal("12.50")),
        currency="EUR",
        credits_purchased=kwargs.get("credits_purchased", 10),
        gateway_payment_id=gateway_payment_id,
        checkout_url=f"https://checkout.test/{gateway_payment_id}",
        status=kwargs.get("status", PaymentStatus.PENDING),
    )


def make_token(user_id: str = "user-1", secret: str = TEST_JWT_SECRET, **claims) -> str:
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "email": f"{user_id}@example.com",
        "exp": datetime.utcnow() + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: str = "user-1") -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """anyio 플러그인을 asyncio 루프로 고정"""
    return "asyncio"


@pytest.fixture
def catalog() -> CreditCatalog:
    return CreditCatalog.from_config(TEST_PACKAGES)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
async def engine(anyio_backend):
    engine = create_async_engine("sqlite+aiosqlite:///:memory:",
                                 connect_args={"check_same_thread": False},
                                 poolclass=StaticPool)
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def file_session_factory(tmp_path, anyio_backend):
    """세션마다 별도 연결을 쓰는 파일 SQLite - 동시 트랜잭션 테스트용"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}",
                                 connect_args={"timeout": 30})
    await init_db(bind=engine)
    factory = build_session_factory(engine)
    async with factory() as s:
        await SqlAlchemyCreditLedger(s).ensure_profile("user-1", UserRole.USER)
        await s.commit()
    yield factory
    await engine.dispose()


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def profile(session) -> str:
    """잔액 0 인 사용자 프로필"""
    await SqlAlchemyCreditLedger(session).ensure_profile("user-1", UserRole.USER)
    await session.commit()
    return "user-1"


@pytest.fixture
async def app(session_factory, gateway, catalog):
    from main import app as fastapi_app
    from api.dependencies import get_payment_gateway, get_identity_provider, get_catalog
    from infrastructure.persistence.database import get_session

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_session] = override_get_session
    fastapi_app.dependency_overrides[get_payment_gateway] = lambda: gateway
    fastapi_app.dependency_overrides[get_catalog] = lambda: catalog
    fastapi_app.dependency_overrides[get_identity_provider] = lambda: SupabaseIdentityProvider(TEST_JWT_SECRET)
    fastapi_app.state.recipe_generator = FallbackRecipeGenerator()
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
