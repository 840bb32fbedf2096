"""ORM model for staff daily check-in / check-out."""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Float, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, new_id


class AttendanceRecord(Base):
    """One row per user and work day. Check-out fields stay NULL until the user checks out."""

    __tablename__ = "attendance_records"
    __table_args__ = (UniqueConstraint("user_id", "work_date", name="uq_attendance_user_day"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(256), nullable=False)
    work_date: Mapped[date] = mapped_column(nullable=False, index=True)
    check_in_time: Mapped[datetime] = mapped_column(nullable=False)
    check_in_latitude: Mapped[float] = mapped_column(Float, nullable=False)
    check_in_longitude: Mapped[float] = mapped_column(Float, nullable=False)
    check_out_time: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    check_out_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    check_out_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
