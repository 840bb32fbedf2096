"""Attendance repository: one record per user and work day."""

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import AttendanceRecord


def get_for_day(session: Session, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
    q = select(AttendanceRecord).where(
        AttendanceRecord.user_id == user_id,
        AttendanceRecord.work_date == work_date,
    )
    return session.scalars(q).first()


def add_check_in(session: Session, **fields) -> AttendanceRecord:
    record = AttendanceRecord(**fields)
    session.add(record)
    session.flush()
    return record


def list_for_day(session: Session, work_date: date) -> list[AttendanceRecord]:
    """Everyone who checked in on ``work_date``, earliest first."""
    q = (
        select(AttendanceRecord)
        .where(AttendanceRecord.work_date == work_date)
        .order_by(AttendanceRecord.check_in_time)
    )
    return list(session.scalars(q).all())
