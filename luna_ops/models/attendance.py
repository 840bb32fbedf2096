"""Staff attendance models."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class AttendanceCheck(BaseModel):
    user_id: str = Field(..., min_length=1)
    user_name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class AttendanceStatus(BaseModel):
    has_checked_in: bool = False
    check_in_time: Optional[datetime] = None
    has_checked_out: bool = False
    check_out_time: Optional[datetime] = None


class AttendanceOut(BaseModel):
    id: str
    user_id: str
    user_name: str
    work_date: date
    check_in_time: datetime
    check_in_latitude: float
    check_in_longitude: float
    check_out_time: Optional[datetime] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None

    model_config = {"from_attributes": True}
