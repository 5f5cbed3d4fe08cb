"""
API 스키마 re-export

사용법:
  from api.schemas import CheckoutRequest, PaymentHistoryResponse
"""
from api.schemas.common import ResponseBase, ErrorResponse, error_responses
from api.schemas.payment import (
    PackageInfo, PackagesResponse, CheckoutRequest, CheckoutResponse,
    CreditsResponse, SpendResponse, ConfirmRequest, ConfirmResponse,
    PaymentHistoryItem, PaymentHistoryResponse,
)
from api.schemas.recipe import GenerateRecipesRequest, RecipeItem, GenerateRecipesResponse
