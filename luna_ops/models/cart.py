"""Cart and customer input models shared by checkout and field sales."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class DeliveryMethod(str, Enum):
    DOOR_TO_DOOR = "door-to-door"
    PICKUP = "pickup"


class CartItem(BaseModel):
    """One cart line. ``price`` is what the client displayed; the server never trusts it."""

    product_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    name: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[float] = None


class CustomerInfo(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    shipping_address: str = Field(..., min_length=1)
    county: Optional[str] = None
    delivery_method: DeliveryMethod = DeliveryMethod.DOOR_TO_DOOR
    delivery_notes: Optional[str] = None
