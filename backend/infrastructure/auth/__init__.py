"""인증 인프라"""
from infrastructure.auth.jwt_service import decode_token, SupabaseIdentityProvider
