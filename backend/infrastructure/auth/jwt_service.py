"""Supabase 액세스 토큰 검증"""
from typing import Optional

from jose import JWTError, jwt

from application.ports.identity_provider import IdentityProviderPort
from domain.entities.user import AuthenticatedUser
from domain.enums import UserRole
from domain.exceptions import ConfigurationError, UnauthorizedError


def decode_token(token: str, secret: str, algorithm: str = "HS256",
                 audience: Optional[str] = None) -> Optional[dict]:
    """토큰 디코딩 - 서명/만료/audience 가 틀리면 None"""
    try:
        return jwt.decode(token, secret, algorithms=[algorithm], audience=audience)
    except JWTError:
        return None


def _role_from_claims(payload: dict) -> UserRole:
    raw = (payload.get("app_metadata") or {}).get("role") or payload.get("user_role") or ""
    try:
        return UserRole(str(raw).lower())
    except ValueError:
        return UserRole.USER


class SupabaseIdentityProvider(IdentityProviderPort):
    def __init__(self, jwt_secret: str, algorithm: str = "HS256", audience: Optional[str] = "authenticated"):
        self._secret = jwt_secret
        self._algorithm = algorithm
        self._audience = audience

    def verify_token(self, bearer_token: str) -> AuthenticatedUser:
        if not self._secret:
            raise ConfigurationError("SUPABASE_JWT_SECRET")
        payload = decode_token(bearer_token, self._secret, self._algorithm, self._audience)
        if payload is None:
            raise UnauthorizedError("유효하지 않거나 만료된 토큰입니다.")
        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedError()
        return AuthenticatedUser(user_id=str(user_id), role=_role_from_claims(payload),
                                 email=payload.get("email"))
