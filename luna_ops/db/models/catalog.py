"""ORM models for the product catalogue: Product, ProductSize, Review."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, SmallInteger, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from luna_ops.db.base import Base, TimestampMixin, new_id, utcnow


class Product(Base, TimestampMixin):
    """Sellable product. Fees are charged once per unique product in an order."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    slug: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    delivery_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    platform_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Running average over review_count reviews
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    sizes: Mapped[list["ProductSize"]] = relationship(
        "ProductSize",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductSize.id",
    )

    __mapper_args__ = {"version_id_col": version_id}

    def size_for(self, size: str) -> Optional["ProductSize"]:
        """Return the size row matching ``size`` ignoring whitespace, or None."""
        wanted = "".join(size.split())
        for s in self.sizes:
            if "".join(s.size.split()) == wanted:
                return s
        return None


class ProductSize(Base):
    """Size variant with its current retail price."""

    __tablename__ = "product_sizes"
    __table_args__ = (UniqueConstraint("product_id", "size", name="uq_product_size"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), nullable=False, index=True)
    size: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    wholesale_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    product: Mapped["Product"] = relationship("Product", back_populates="sizes")


class Review(Base):
    """Customer rating of a product, optionally tied to the order it was bought in."""

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("order_id", "product_id", name="uq_review_order_product"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id"), nullable=False, index=True)
    order_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    user_name: Mapped[str] = mapped_column(String(256), nullable=False)
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
