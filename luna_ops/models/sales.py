"""Field sale, daily sales log and end-of-day reconciliation models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from luna_ops.models.cart import CartItem


class FieldSaleRequest(BaseModel):
    items: list[CartItem] = Field(..., min_length=1)
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    salesperson_id: str
    salesperson_name: str
    provider: str = "mpesa"
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class FieldSaleResponse(BaseModel):
    order_id: str
    reference: str
    total_amount: float


class FieldSaleLogOut(BaseModel):
    id: str
    order_id: str
    salesperson_id: str
    salesperson_name: str
    customer_name: str
    customer_phone: str
    total_amount: float
    payment_reference: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReconciliationLine(BaseModel):
    product_id: str
    product_name: str
    size: str
    qty_issued: int = Field(..., ge=0)
    qty_returned: int = Field(0, ge=0)
    qty_samples: int = Field(0, ge=0)
    qty_defects: int = Field(0, ge=0)


class ReconciliationRequest(BaseModel):
    salesperson_id: str
    salesperson_name: str
    reconciled_by: str
    lines: list[ReconciliationLine] = Field(..., min_length=1)


class ReconciliationLogOut(BaseModel):
    id: str
    salesperson_id: str
    product_id: str
    product_name: str
    size: str
    qty_issued: int
    qty_returned: int
    qty_samples: int
    qty_defects: int
    qty_sold: int
    reconciled_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SalesLogLine(BaseModel):
    product_id: str
    size: str
    opening_stock: int = Field(0, ge=0)
    qty_issued: int = Field(0, ge=0)
    qty_sold: int = Field(0, ge=0)
    qty_returned: int = Field(0, ge=0)
    defects: int = Field(0, ge=0)


class SalesLogRequest(BaseModel):
    salesperson_id: str
    salesperson_name: str
    lines: list[SalesLogLine] = Field(..., min_length=1)


class SalesLogOut(SalesLogLine):
    id: str
    salesperson_id: str
    salesperson_name: str
    created_at: datetime

    model_config = {"from_attributes": True}
