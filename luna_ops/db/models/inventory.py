"""ORM model for finished-goods stock: InventoryEntry."""

from datetime import datetime

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, utcnow


class InventoryEntry(Base):
    """Per-SKU stock counter keyed by ``productId-size`` (whitespace stripped from size).

    ``version_id`` is the optimistic lock column: a flush that updates a row
    whose version changed since it was read raises StaleDataError.
    """

    __tablename__ = "inventory_entries"

    key: Mapped[str] = mapped_column(String(256), primary_key=True)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    size: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version_id}
