"""Purchase order models."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class PurchaseOrderItemIn(BaseModel):
    raw_material_id: str
    raw_material_name: str
    quantity: float = Field(..., gt=0)
    unit_cost: float = Field(..., ge=0)


class PurchaseOrderCreate(BaseModel):
    supplier_name: str = Field(..., min_length=1)
    expected_delivery_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: str
    items: list[PurchaseOrderItemIn] = Field(..., min_length=1)


class PurchaseOrderItemOut(BaseModel):
    raw_material_id: str
    raw_material_name: str
    quantity: float
    unit_cost: float

    model_config = {"from_attributes": True}


class PurchaseOrderOut(BaseModel):
    id: str
    po_number: str
    supplier_name: str
    expected_delivery_date: Optional[date] = None
    notes: Optional[str] = None
    total_cost: float
    status: str
    created_by: str
    created_at: datetime
    items: list[PurchaseOrderItemOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}
