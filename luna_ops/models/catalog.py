"""Product catalogue and review models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProductSizeIn(BaseModel):
    size: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    wholesale_price: Optional[float] = Field(None, ge=0)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    delivery_fee: float = Field(0.0, ge=0)
    platform_fee: float = Field(0.0, ge=0)
    sizes: list[ProductSizeIn] = Field(..., min_length=1)


class ProductSizeOut(BaseModel):
    size: str
    price: float
    wholesale_price: Optional[float] = None

    model_config = {"from_attributes": True}


class ProductOut(BaseModel):
    id: str
    slug: str
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    delivery_fee: float
    platform_fee: float
    is_active: bool
    rating: float = 0.0
    review_count: int = 0
    sizes: list[ProductSizeOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ReviewCreate(BaseModel):
    user_id: str
    user_name: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class OrderReviewCreate(BaseModel):
    """Review left from the delivered-order link; the reviewer is the order's customer."""

    product_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class ReviewOut(BaseModel):
    id: str
    product_id: str
    order_id: Optional[str] = None
    user_id: str
    user_name: str
    rating: int
    comment: str
    created_at: datetime

    model_config = {"from_attributes": True}
