"""Order status values and API shapes for orders and stock."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "pending-payment"
    PAID = "paid"
    PROCESSING = "processing"
    READY_FOR_DISPATCH = "ready-for-dispatch"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURN_PENDING = "return-pending"
    RETURNED = "returned"


class OrderItemOut(BaseModel):
    product_id: str
    product_name: str
    size: str
    quantity: int
    unit_price: float
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}


class OrderOut(BaseModel):
    id: str
    user_id: Optional[str] = None
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    county: Optional[str] = None
    delivery_method: str
    delivery_notes: Optional[str] = None
    subtotal: float
    delivery_fee: float
    platform_fee: float
    total_amount: float
    status: str
    paystack_reference: Optional[str] = None
    order_date: datetime
    items: list[OrderItemOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class StatusUpdateRequest(BaseModel):
    status: str
    user_id: str = "system"
    user_name: str = "System"


class PlaceOrderResponse(BaseModel):
    order_id: str


class StockOut(BaseModel):
    key: str
    product_id: str
    size: str
    quantity: int

    model_config = {"from_attributes": True}


class StockUpdate(BaseModel):
    """Admin stock override. Any integer is accepted, including negatives."""

    quantity: int
