"""결제 관련 스키마"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict
from pydantic import BaseModel, Field, field_serializer
from api.schemas.common import ResponseBase


class PackageInfo(BaseModel):
    credits: int
    price: Decimal
    description: str

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class PackagesResponse(BaseModel):
    packages: Dict[str, PackageInfo]


class CheckoutRequest(BaseModel):
    package_id: str = Field(..., alias="packageId")

    class Config:
        populate_by_name = True


class CheckoutResponse(BaseModel):
    checkout_url: str = Field(..., alias="checkoutUrl")
    payment_id: str = Field(..., alias="paymentId")
    gateway_payment_id: str = Field(..., alias="gatewayPaymentId")

    class Config:
        populate_by_name = True


class CreditsResponse(BaseModel):
    credits: int


class SpendResponse(ResponseBase):
    credits: int


class ConfirmRequest(BaseModel):
    payment_id: Optional[str] = Field(None, alias="paymentId")
    gateway_payment_id: Optional[str] = Field(None, alias="gatewayPaymentId")

    class Config:
        populate_by_name = True


class ConfirmResponse(ResponseBase):
    status: str
    outcome: str
    credits: int = 0


class PaymentHistoryItem(BaseModel):
    id: str
    user_id: str
    package_id: str
    amount: Decimal
    currency: str
    credits_purchased: int
    status: str
    gateway_payment_id: str
    checkout_url: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        # 클라이언트는 금액을 number 로 받는다
        return float(amount)


class PaymentHistoryResponse(BaseModel):
    payments: List[PaymentHistoryItem]
