"""Activity log repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import ActivityLog


def add_activity(session: Session, description: str, user_id: str, user_name: str) -> ActivityLog:
    row = ActivityLog(description=description, user_id=user_id, user_name=user_name)
    session.add(row)
    session.flush()
    return row


def recent(session: Session, count: int = 50) -> list[ActivityLog]:
    q = select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(count)
    return list(session.scalars(q).all())
