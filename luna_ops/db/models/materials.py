"""ORM models for raw materials: RawMaterial, RawMaterialIntake."""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, TimestampMixin, new_id, utcnow

UNITS_OF_MEASURE = ("kg", "L", "g", "ml", "units")


class RawMaterial(Base, TimestampMixin):
    """Raw material stock counter. Quantity is in ``unit_of_measure``."""

    __tablename__ = "raw_materials"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    unit_of_measure: Mapped[str] = mapped_column(String(16), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version_id}


class RawMaterialIntake(Base):
    """Delivery of a raw material from a supplier (goods received note)."""

    __tablename__ = "raw_material_intakes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    raw_material_id: Mapped[str] = mapped_column(ForeignKey("raw_materials.id"), nullable=False, index=True)
    supplier: Mapped[str] = mapped_column(String(256), nullable=False)
    delivery_note_id: Mapped[str] = mapped_column(String(128), nullable=False)
    quantity_on_note: Mapped[float] = mapped_column(Float, nullable=False)
    actual_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    batch_number: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    physical_check: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    delivery_note_photo_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    received_by: Mapped[str] = mapped_column(String(128), nullable=False)
    received_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
