"""Production runs: consume raw materials and add finished goods in one transaction."""

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.models import ProductionRun
from luna_ops.db.repositories import inventory_key, product_repo, production_repo
from luna_ops.exceptions import ProductNotFound, ProductionRunError, ValidationError
from luna_ops.models.manufacturing import ConsumedMaterial
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.ledger import InventoryLedger, RawMaterialLedger
from luna_ops.utils.logger import get_logger
from luna_ops.utils.tracing import get_tracer

logger = get_logger("luna_ops.services.manufacturing")


@dataclass
class ProductionRunResult:
    finished_good_item_id: str
    finished_good_quantity: int
    consumed: list[dict] = field(default_factory=list)
    production_run_id: Optional[str] = None
    product_name: str = ""


class ManufacturingService:
    def __init__(self, db: Database, activity: ActivityService):
        self._db = db
        self._activity = activity

    def log_production_run(
        self,
        product_id: str,
        size: str,
        quantity_produced: int,
        consumed_materials: list[ConsumedMaterial],
        operator_id: str,
        operator_name: str,
    ) -> ProductionRunResult:
        """Decrement every declared material and increment the finished good, all or nothing.

        The finished good must be an existing product size; its ledger key is
        built with inventory_key so the stock is the one orders draw from.

        The audit record and activity entry are written after commit and never
        undo the run if they fail. Raises ProductionRunError wrapping the cause.
        """
        if quantity_produced <= 0:
            raise ProductionRunError(
                "quantity produced must be positive",
                cause=ValidationError(f"quantity_produced={quantity_produced}"),
            )

        finished_good_item_id = inventory_key(product_id, size)

        def _run(session: Session) -> ProductionRunResult:
            product = product_repo.get_product(session, product_id)
            size_row = product.size_for(size) if product is not None else None
            if size_row is None:
                raise ProductNotFound(f"{product_id} ({size})")
            consumed = []
            for m in consumed_materials:
                material = RawMaterialLedger.decrement(session, m.raw_material_id, m.quantity, m.raw_material_name)
                consumed.append(
                    {
                        "raw_material_id": material.id,
                        "raw_material_name": material.name,
                        "quantity_consumed": m.quantity,
                    }
                )
            new_quantity = InventoryLedger.increment(
                session, finished_good_item_id, quantity_produced, product_id=product.id, size=size_row.size
            )
            session.flush()
            return ProductionRunResult(
                finished_good_item_id, new_quantity, consumed, product_name=f"{product.name} {size_row.size}"
            )

        with get_tracer().start_as_current_span("manufacturing.production_run") as span:
            span.set_attribute("production.item_id", finished_good_item_id)
            span.set_attribute("production.quantity", quantity_produced)
            try:
                result = self._db.run_transaction(_run, name="manufacturing.production_run")
            except Exception as e:
                logger.error(
                    "manufacturing.run.failed",
                    finished_good_item_id=finished_good_item_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise ProductionRunError(str(e), cause=e) from e

        logger.info(
            "manufacturing.run.committed",
            finished_good_item_id=finished_good_item_id,
            quantity_produced=quantity_produced,
            new_quantity=result.finished_good_quantity,
            materials=len(result.consumed),
        )

        try:
            with self._db.session() as session:
                run = production_repo.add_run(
                    session,
                    finished_good_item_id=finished_good_item_id,
                    product_name=result.product_name,
                    quantity_produced=quantity_produced,
                    consumed_materials=result.consumed,
                    operator_id=operator_id,
                    operator_name=operator_name,
                )
                result.production_run_id = run.id
        except Exception as e:
            logger.error("manufacturing.audit.failed", finished_good_item_id=finished_good_item_id, error=str(e))

        self._activity.log_activity(
            f"Logged production of {quantity_produced} units of {result.product_name}",
            operator_id,
            operator_name,
        )
        return result

    def list_production_runs(self, limit: int = 50) -> list[ProductionRun]:
        """Most recent runs first."""
        with self._db.session() as session:
            return production_repo.list_runs(session, limit=limit)
