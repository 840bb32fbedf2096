"""ORM models for customer orders: Order, OrderItem.

An order is written once by the order placement transaction. After that only
``status`` may change; the before_update listeners below reject anything else.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Float, ForeignKey, Integer, String, Text, event, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship

from luna_ops.db.base import Base, new_id, utcnow
from luna_ops.exceptions import ImmutableRecordError

_MUTABLE_ORDER_FIELDS = frozenset({"status", "updated_at"})


class Order(Base):
    """Paid customer order with a server-computed total."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    customer_name: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False)
    shipping_address: Mapped[str] = mapped_column(Text, nullable=False)
    county: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    delivery_method: Mapped[str] = mapped_column(String(32), nullable=False)
    delivery_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False)
    delivery_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    platform_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    paystack_reference: Mapped[Optional[str]] = mapped_column(String(128), unique=True, nullable=True)
    order_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )


class OrderItem(Base):
    """Line item snapshot: price and name as they were when the order was paid."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    size: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="items")


@event.listens_for(Order, "before_update")
def prevent_order_rewrite(mapper, connection, target):
    """Reject any flushed change to an order other than its status."""
    state = inspect(target)
    changed = {
        attr.key
        for attr in state.attrs
        if attr.key in mapper.column_attrs and attr.history.has_changes()
    }
    frozen = changed - _MUTABLE_ORDER_FIELDS
    if frozen:
        raise ImmutableRecordError(
            f"Order {target.id} is immutable; cannot change {', '.join(sorted(frozen))}"
        )


@event.listens_for(OrderItem, "before_update")
def prevent_order_item_update(mapper, connection, target):
    raise ImmutableRecordError(f"Order items are immutable (order {target.order_id})")
