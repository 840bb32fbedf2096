"""Referral link and activity feed models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReferralCreate(BaseModel):
    destination_url: str = Field(..., min_length=1)
    campaign_name: Optional[str] = None
    marketer_id: str
    marketer_name: str


class ReferralOut(BaseModel):
    code: str
    destination_url: str
    short_url: str
    campaign_name: Optional[str] = None
    marketer_id: str
    marketer_name: str
    click_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityOut(BaseModel):
    id: str
    description: str
    user_id: str
    user_name: str
    created_at: datetime

    model_config = {"from_attributes": True}
