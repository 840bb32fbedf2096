"""Activity feed: human-readable record of back-office actions."""

from luna_ops.db import Database
from luna_ops.db.models import ActivityLog
from luna_ops.db.repositories import activity_repo
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.activity")


class ActivityService:
    def __init__(self, db: Database):
        self._db = db

    def log_activity(self, description: str, user_id: str, user_name: str) -> None:
        """Append an activity entry. Best-effort: failures are logged, never raised."""
        try:
            with self._db.session() as session:
                activity_repo.add_activity(session, description, user_id, user_name)
        except Exception as e:
            logger.error("activity.log.failed", description=description, user_id=user_id, error=str(e))

    def recent_activities(self, count: int = 50) -> list[ActivityLog]:
        with self._db.session() as session:
            return activity_repo.recent(session, count)
