"""Checkout request/response models and the Paystack webhook event envelope."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from luna_ops.models.cart import CartItem, CustomerInfo


class InitializeCheckoutRequest(BaseModel):
    items: list[CartItem] = Field(..., min_length=1)
    customer: CustomerInfo
    user_id: Optional[str] = None
    client_total: Optional[float] = None


class InitializeCheckoutResponse(BaseModel):
    authorization_url: str
    access_code: str
    reference: str


class VerifyCheckoutRequest(BaseModel):
    reference: str = Field(..., min_length=1)
    items: list[CartItem] = Field(..., min_length=1)
    customer: CustomerInfo
    user_id: Optional[str] = None
    client_total: Optional[float] = None


class PaystackEvent(BaseModel):
    """Webhook body: ``{"event": "charge.success", "data": {...}}``."""

    event: str
    data: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "ignore"}
