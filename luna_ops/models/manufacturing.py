"""Production run and raw material models."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

UnitOfMeasure = Literal["kg", "L", "g", "ml", "units"]


class ConsumedMaterial(BaseModel):
    raw_material_id: str
    raw_material_name: Optional[str] = None
    quantity: float = Field(..., gt=0)


class ProductionRunRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    quantity_produced: int = Field(..., gt=0)
    consumed_materials: list[ConsumedMaterial] = Field(..., min_length=1)
    operator_id: str
    operator_name: str


class ConsumedMaterialOut(BaseModel):
    raw_material_id: str
    raw_material_name: str
    quantity_consumed: float

    model_config = {"from_attributes": True}


class ProductionRunOut(BaseModel):
    id: str
    finished_good_item_id: str
    product_name: str
    quantity_produced: int
    operator_id: str
    operator_name: str
    created_at: datetime
    consumed_materials: list[ConsumedMaterialOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class RawMaterialCreate(BaseModel):
    name: str = Field(..., min_length=1)
    unit_of_measure: UnitOfMeasure
    quantity: float = Field(0.0, ge=0)


class RawMaterialOut(BaseModel):
    id: str
    name: str
    unit_of_measure: str
    quantity: float

    model_config = {"from_attributes": True}


class IntakeRequest(BaseModel):
    supplier: str
    delivery_note_id: str
    quantity_on_note: float = Field(..., ge=0)
    actual_quantity: float = Field(..., gt=0)
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    physical_check: Optional[str] = None
    delivery_note_photo_url: Optional[str] = None
    received_by: str


class IntakeOut(IntakeRequest):
    id: str
    raw_material_id: str
    received_at: datetime

    model_config = {"from_attributes": True}
