"""Order repository: lookups and listing. Orders are only created by the order placement transaction."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from luna_ops.db.models import Order


def get_order(session: Session, order_id: str) -> Optional[Order]:
    q = select(Order).where(Order.id == order_id).options(selectinload(Order.items))
    return session.scalars(q).first()


def get_by_reference(session: Session, reference: str) -> Optional[Order]:
    q = select(Order).where(Order.paystack_reference == reference).options(selectinload(Order.items))
    return session.scalars(q).first()


def list_orders(
    session: Session,
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = 100,
) -> list[Order]:
    """Newest first, optionally filtered by status and/or placing user."""
    q = select(Order).options(selectinload(Order.items)).order_by(Order.order_date.desc()).limit(limit)
    if status:
        q = q.where(Order.status == status)
    if user_id:
        q = q.where(Order.user_id == user_id)
    return list(session.scalars(q).all())
