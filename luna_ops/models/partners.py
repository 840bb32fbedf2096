"""Partner programme application models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

PartnerType = Literal["influencer", "delivery-partner", "pickup-location"]


class PartnerApplicationCreate(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    partner_type: PartnerType
    message: str = Field(..., min_length=10)


class ApplicationStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]
    user_id: str = "system"
    user_name: str = "System"


class PartnerApplicationOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    partner_type: str
    message: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
