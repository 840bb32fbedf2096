"""Staff users that receive order notifications."""

from typing import Iterable

from luna_ops.db import Database
from luna_ops.db.models import User
from luna_ops.db.repositories import user_repo
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.users")


class UserService:
    def __init__(self, db: Database):
        self._db = db

    def add_user(self, email: str, display_name: str, roles: Iterable[str]) -> User:
        with self._db.session() as session:
            user = user_repo.upsert_user(session, email, display_name, roles)
        logger.info("users.saved", email=user.email, roles=user.roles)
        return user

    def list_recipients(self, roles: Iterable[str]) -> list[User]:
        with self._db.session() as session:
            return user_repo.list_by_roles(session, roles)
