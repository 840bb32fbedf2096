"""User repository (notification recipients)."""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import User


def get_by_email(session: Session, email: str) -> Optional[User]:
    return session.scalars(select(User).where(User.email == email.lower())).first()


def upsert_user(session: Session, email: str, display_name: str, roles: Iterable[str]) -> User:
    """Create the user or replace name and roles on an existing one."""
    role_str = ",".join(sorted({r.strip().lower() for r in roles if r.strip()}))
    user = get_by_email(session, email)
    if user is None:
        user = User(email=email.lower(), display_name=display_name, roles=role_str)
        session.add(user)
    else:
        user.display_name = display_name
        user.roles = role_str
    session.flush()
    return user


def list_by_roles(session: Session, roles: Iterable[str]) -> list[User]:
    """Users holding any of ``roles``."""
    wanted = set(roles)
    users = session.scalars(select(User).order_by(User.email)).all()
    return [u for u in users if wanted.intersection(u.role_list)]
