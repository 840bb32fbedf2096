"""Partner application repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import PartnerApplication


def get_application(session: Session, application_id: str) -> Optional[PartnerApplication]:
    return session.get(PartnerApplication, application_id)


def add_application(session: Session, **fields) -> PartnerApplication:
    application = PartnerApplication(**fields)
    session.add(application)
    session.flush()
    return application


def list_applications(session: Session, status: Optional[str] = None) -> list[PartnerApplication]:
    q = select(PartnerApplication).order_by(PartnerApplication.created_at.desc())
    if status:
        q = q.where(PartnerApplication.status == status)
    return list(session.scalars(q).all())
