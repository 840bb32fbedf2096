"""Purchase order repository."""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from luna_ops.db.models import PurchaseOrder, PurchaseOrderItem


def next_po_number(session: Session) -> str:
    """Sequential human-readable number: PO-00001, PO-00002, ..."""
    count = session.scalar(select(func.count(PurchaseOrder.id))) or 0
    return f"PO-{count + 1:05d}"


def add_purchase_order(session: Session, items: list[dict], **fields) -> PurchaseOrder:
    po = PurchaseOrder(**fields, items=[PurchaseOrderItem(**i) for i in items])
    session.add(po)
    session.flush()
    return po


def list_purchase_orders(session: Session, status: Optional[str] = None) -> list[PurchaseOrder]:
    q = select(PurchaseOrder).options(selectinload(PurchaseOrder.items)).order_by(PurchaseOrder.created_at.desc())
    if status:
        q = q.where(PurchaseOrder.status == status)
    return list(session.scalars(q).all())
