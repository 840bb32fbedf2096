"""Production run repository (append-only audit trail)."""

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from luna_ops.db.models import ProductionRun, ProductionRunMaterial


def add_run(
    session: Session,
    finished_good_item_id: str,
    product_name: str,
    quantity_produced: int,
    consumed_materials: list[dict],
    operator_id: str,
    operator_name: str,
) -> ProductionRun:
    """Insert a run with its consumed materials (dicts with raw_material_id, raw_material_name, quantity_consumed)."""
    run = ProductionRun(
        finished_good_item_id=finished_good_item_id,
        product_name=product_name,
        quantity_produced=quantity_produced,
        operator_id=operator_id,
        operator_name=operator_name,
        consumed_materials=[ProductionRunMaterial(**m) for m in consumed_materials],
    )
    session.add(run)
    session.flush()
    return run


def list_runs(session: Session, limit: int = 50) -> list[ProductionRun]:
    q = (
        select(ProductionRun)
        .options(selectinload(ProductionRun.consumed_materials))
        .order_by(ProductionRun.created_at.desc())
        .limit(limit)
    )
    return list(session.scalars(q).all())