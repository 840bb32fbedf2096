"""Referral link repository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from luna_ops.db.models import ReferralLink


def get_link(session: Session, code: str) -> Optional[ReferralLink]:
    return session.get(ReferralLink, code)


def add_link(session: Session, **fields) -> ReferralLink:
    link = ReferralLink(**fields)
    session.add(link)
    session.flush()
    return link


def increment_clicks(session: Session, code: str) -> bool:
    """Atomically add one click. Returns False when the code does not exist."""
    result = session.execute(
        update(ReferralLink)
        .where(ReferralLink.code == code)
        .values(click_count=ReferralLink.click_count + 1)
    )
    return result.rowcount > 0


def list_by_marketer(session: Session, marketer_id: str) -> list[ReferralLink]:
    q = (
        select(ReferralLink)
        .where(ReferralLink.marketer_id == marketer_id)
        .order_by(ReferralLink.created_at.desc())
    )
    return list(session.scalars(q).all())
