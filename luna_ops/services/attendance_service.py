"""Staff daily check-in and check-out with the location each was made from."""

from datetime import date, datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.base import utcnow
from luna_ops.db.models import AttendanceRecord
from luna_ops.db.repositories import attendance_repo
from luna_ops.exceptions import ValidationError
from luna_ops.models.attendance import AttendanceCheck, AttendanceStatus
from luna_ops.services.activity_service import ActivityService
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.attendance")


class AttendanceService:
    """One check-in and at most one check-out per user per work day.

    The work day is the calendar date of ``clock()`` shifted by ``utc_offset_hours``.
    """

    def __init__(
        self,
        db: Database,
        activity: ActivityService,
        utc_offset_hours: float = 3,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._db = db
        self._activity = activity
        self._tz = timezone(timedelta(hours=utc_offset_hours))
        self._clock = clock

    def _today(self, now: datetime) -> date:
        return now.astimezone(self._tz).date()

    def check_in(self, check: AttendanceCheck) -> AttendanceRecord:
        now = self._clock()
        work_date = self._today(now)

        def _check_in(session: Session) -> AttendanceRecord:
            if attendance_repo.get_for_day(session, check.user_id, work_date) is not None:
                raise ValidationError("You have already checked in today.")
            return attendance_repo.add_check_in(
                session,
                user_id=check.user_id,
                user_name=check.user_name,
                work_date=work_date,
                check_in_time=now,
                check_in_latitude=check.latitude,
                check_in_longitude=check.longitude,
            )

        record = self._db.run_transaction(_check_in, name="attendance.check_in")
        logger.info("attendance.checked_in", user_id=check.user_id, work_date=str(work_date))
        self._activity.log_activity("Checked in for the day.", check.user_id, check.user_name)
        return record

    def check_out(self, check: AttendanceCheck) -> AttendanceRecord:
        now = self._clock()
        work_date = self._today(now)
        with self._db.session() as session:
            record = attendance_repo.get_for_day(session, check.user_id, work_date)
            if record is None:
                raise ValidationError("No check-in record found for today to check out against.")
            if record.check_out_time is not None:
                raise ValidationError("You have already checked out today.")
            record.check_out_time = now
            record.check_out_latitude = check.latitude
            record.check_out_longitude = check.longitude
            session.flush()

        logger.info("attendance.checked_out", user_id=check.user_id, work_date=str(work_date))
        self._activity.log_activity("Checked out for the day.", check.user_id, check.user_name)
        return record

    def today_status(self, user_id: str) -> AttendanceStatus:
        with self._db.session() as session:
            record = attendance_repo.get_for_day(session, user_id, self._today(self._clock()))
        if record is None:
            return AttendanceStatus()
        return AttendanceStatus(
            has_checked_in=True,
            check_in_time=record.check_in_time,
            has_checked_out=record.check_out_time is not None,
            check_out_time=record.check_out_time,
        )

    def todays_attendance(self) -> list[AttendanceRecord]:
        """Everyone checked in today, earliest first."""
        with self._db.session() as session:
            return attendance_repo.list_for_day(session, self._today(self._clock()))
