"""Inventory repository: finished-goods stock rows keyed by ``productId-size``."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import InventoryEntry


def inventory_key(product_id: str, size: str) -> str:
    """Ledger key for a SKU: ``f"{product_id}-{size}"`` with all whitespace removed from size."""
    return f"{product_id}-{''.join(size.split())}"


def get_entry(session: Session, key: str) -> Optional[InventoryEntry]:
    return session.get(InventoryEntry, key)


def create_entry(session: Session, key: str, product_id: str, size: str, quantity: int) -> InventoryEntry:
    entry = InventoryEntry(key=key, product_id=product_id, size=size, quantity=quantity)
    session.add(entry)
    return entry


def list_entries(session: Session, product_id: Optional[str] = None) -> list[InventoryEntry]:
    q = select(InventoryEntry).order_by(InventoryEntry.key)
    if product_id:
        q = q.where(InventoryEntry.product_id == product_id)
    return list(session.scalars(q).all())
