"""ORM models for field sales: FieldSaleLog, SalesLog, ReconciliationLog."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, new_id, utcnow


class FieldSaleLog(Base):
    """One point-of-sale transaction made by a salesperson in the field."""

    __tablename__ = "field_sale_logs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    order_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    salesperson_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    salesperson_name: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_reference: Mapped[str] = mapped_column(String(128), nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)


class ReconciliationLog(Base):
    """End-of-day stock reconciliation line for one salesperson and SKU."""

    __tablename__ = "reconciliation_logs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    salesperson_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    salesperson_name: Mapped[str] = mapped_column(String(256), nullable=False)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    size: Mapped[str] = mapped_column(String(64), nullable=False)
    qty_issued: Mapped[int] = mapped_column(Integer, nullable=False)
    qty_returned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_samples: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_defects: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_sold: Mapped[int] = mapped_column(Integer, nullable=False)
    reconciled_by: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class SalesLog(Base):
    """Salesperson's own daily stock movement line for one SKU."""

    __tablename__ = "sales_logs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    salesperson_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    salesperson_name: Mapped[str] = mapped_column(String(256), nullable=False)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    size: Mapped[str] = mapped_column(String(64), nullable=False)
    opening_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_issued: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_sold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    qty_returned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    defects: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
