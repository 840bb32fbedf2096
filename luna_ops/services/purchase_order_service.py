"""Purchase orders for raw materials."""

from typing import Optional

from luna_ops.db import Database
from luna_ops.db.models import PURCHASE_ORDER_STATUSES, PurchaseOrder
from luna_ops.db.repositories import material_repo, purchase_order_repo
from luna_ops.exceptions import MaterialNotFound, ValidationError
from luna_ops.models.purchasing import PurchaseOrderCreate
from luna_ops.services.activity_service import ActivityService
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.purchase_orders")


class PurchaseOrderService:
    def __init__(self, db: Database, activity: ActivityService):
        self._db = db
        self._activity = activity

    def create_purchase_order(self, data: PurchaseOrderCreate) -> PurchaseOrder:
        """Create a PO in ``ordered`` status. Every line must name an existing raw material."""
        total_cost = round(sum(i.quantity * i.unit_cost for i in data.items), 2)
        with self._db.session() as session:
            for item in data.items:
                if material_repo.get_material(session, item.raw_material_id) is None:
                    raise MaterialNotFound(item.raw_material_id)
            po = purchase_order_repo.add_purchase_order(
                session,
                items=[i.model_dump() for i in data.items],
                po_number=purchase_order_repo.next_po_number(session),
                supplier_name=data.supplier_name,
                expected_delivery_date=data.expected_delivery_date,
                notes=data.notes,
                total_cost=total_cost,
                status="ordered",
                created_by=data.created_by,
            )
        logger.info("purchase_order.created", po_number=po.po_number, supplier=data.supplier_name, total_cost=total_cost)
        self._activity.log_activity(
            f"Created purchase order {po.po_number} for {data.supplier_name}",
            data.created_by,
            data.created_by,
        )
        return po

    def list_purchase_orders(self, status: Optional[str] = None) -> list[PurchaseOrder]:
        if status and status not in PURCHASE_ORDER_STATUSES:
            raise ValidationError(f"Unknown purchase order status {status!r}")
        with self._db.session() as session:
            return purchase_order_repo.list_purchase_orders(session, status=status)
