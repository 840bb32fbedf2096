"""ORM models for the manufacturing audit trail: ProductionRun, ProductionRunMaterial."""

from datetime import datetime

from sqlalchemy import Float, ForeignKey, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from luna_ops.db.base import Base, new_id, utcnow
from luna_ops.exceptions import ImmutableRecordError


class ProductionRun(Base):
    """Append-only record of one production run."""

    __tablename__ = "production_runs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    finished_good_item_id: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    quantity_produced: Mapped[int] = mapped_column(Integer, nullable=False)
    operator_id: Mapped[str] = mapped_column(String(128), nullable=False)
    operator_name: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)

    consumed_materials: Mapped[list["ProductionRunMaterial"]] = relationship(
        "ProductionRunMaterial",
        back_populates="production_run",
        cascade="all, delete-orphan",
        order_by="ProductionRunMaterial.id",
    )


class ProductionRunMaterial(Base):
    """Raw material consumed by a production run."""

    __tablename__ = "production_run_materials"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    production_run_id: Mapped[str] = mapped_column(ForeignKey("production_runs.id"), nullable=False, index=True)
    raw_material_id: Mapped[str] = mapped_column(String(64), nullable=False)
    raw_material_name: Mapped[str] = mapped_column(String(256), nullable=False)
    quantity_consumed: Mapped[float] = mapped_column(Float, nullable=False)

    production_run: Mapped["ProductionRun"] = relationship("ProductionRun", back_populates="consumed_materials")


@event.listens_for(ProductionRun, "before_update")
def prevent_production_run_update(mapper, connection, target):
    raise ImmutableRecordError(f"Production run {target.id} is immutable")


@event.listens_for(ProductionRunMaterial, "before_update")
def prevent_production_material_update(mapper, connection, target):
    raise ImmutableRecordError(f"Production run {target.production_run_id} is immutable")
