"""End-of-day stock reconciliation for field salespeople."""

from luna_ops.db import Database
from luna_ops.db.models import ReconciliationLog
from luna_ops.db.repositories import sales_repo
from luna_ops.exceptions import ValidationError
from luna_ops.models.sales import ReconciliationRequest
from luna_ops.services.activity_service import ActivityService
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.reconciliation")


class ReconciliationService:
    def __init__(self, db: Database, activity: ActivityService):
        self._db = db
        self._activity = activity

    def create_reconciliation_logs(self, request: ReconciliationRequest) -> list[ReconciliationLog]:
        """Write one log per line with qty_sold = issued - returned - samples - defects.

        A line with a negative result rejects the whole batch.
        """
        rows = []
        for line in request.lines:
            qty_sold = line.qty_issued - line.qty_returned - line.qty_samples - line.qty_defects
            if qty_sold < 0:
                raise ValidationError(
                    f"Invalid quantities for {line.product_name} ({line.size}): "
                    f"returned, samples and defects exceed the {line.qty_issued} issued"
                )
            rows.append(
                {
                    **line.model_dump(),
                    "qty_sold": qty_sold,
                    "salesperson_id": request.salesperson_id,
                    "salesperson_name": request.salesperson_name,
                    "reconciled_by": request.reconciled_by,
                }
            )

        with self._db.session() as session:
            logs = sales_repo.add_reconciliation_logs(session, rows)
        total_sold = sum(r["qty_sold"] for r in rows)
        logger.info("reconciliation.created", salesperson_id=request.salesperson_id, lines=len(rows), total_sold=total_sold)
        self._activity.log_activity(
            f"Reconciled stock for {request.salesperson_name}: {total_sold} units sold",
            request.salesperson_id,
            request.reconciled_by,
        )
        return logs

    def list_reconciliation_logs(self, salesperson_id: str | None = None) -> list[ReconciliationLog]:
        with self._db.session() as session:
            return sales_repo.list_reconciliation_logs(session, salesperson_id=salesperson_id)
