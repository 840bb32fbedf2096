"""Raw material repository: materials and intake records."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import RawMaterial, RawMaterialIntake


def get_material(session: Session, material_id: str) -> Optional[RawMaterial]:
    return session.get(RawMaterial, material_id)


def get_by_name(session: Session, name: str) -> Optional[RawMaterial]:
    return session.scalars(select(RawMaterial).where(RawMaterial.name == name)).first()


def list_materials(session: Session) -> list[RawMaterial]:
    return list(session.scalars(select(RawMaterial).order_by(RawMaterial.name)).all())


def add_material(session: Session, name: str, unit_of_measure: str, quantity: float = 0.0) -> RawMaterial:
    material = RawMaterial(name=name, unit_of_measure=unit_of_measure, quantity=quantity)
    session.add(material)
    session.flush()
    return material


def add_intake(session: Session, **fields) -> RawMaterialIntake:
    intake = RawMaterialIntake(**fields)
    session.add(intake)
    session.flush()
    return intake


def list_intakes(session: Session, material_id: Optional[str] = None, limit: int = 100) -> list[RawMaterialIntake]:
    q = select(RawMaterialIntake).order_by(RawMaterialIntake.received_at.desc()).limit(limit)
    if material_id:
        q = q.where(RawMaterialIntake.raw_material_id == material_id)
    return list(session.scalars(q).all())
