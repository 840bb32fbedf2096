"""Daily sales logs submitted by salespeople, with an admin summary e-mail."""

from datetime import datetime, timezone
from typing import Optional

from luna_ops.db import Database
from luna_ops.db.models import SalesLog
from luna_ops.db.repositories import product_repo, sales_repo
from luna_ops.exceptions import ProductNotFound, ValidationError
from luna_ops.mail_provider import templates
from luna_ops.models.sales import SalesLogRequest
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.notifier import Notifier
from luna_ops.services.staff_mail import ADMIN_ROLES, StaffMailer
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.sales_logs")


class SalesLogService:
    def __init__(self, db: Database, staff_mail: StaffMailer, notifier: Notifier, activity: ActivityService):
        self._db = db
        self._staff_mail = staff_mail
        self._notifier = notifier
        self._activity = activity

    def create_sales_logs(self, request: SalesLogRequest) -> list[SalesLog]:
        """Write every line or none.

        A line accounting for more units (sold, returned, defective) than the
        salesperson held (opening stock plus issued) rejects the batch, as does
        a line for an unknown product size.
        """
        for line in request.lines:
            accounted = line.qty_sold + line.qty_returned + line.defects
            available = line.opening_stock + line.qty_issued
            if accounted > available:
                raise ValidationError(
                    f"Invalid quantities for {line.product_id} ({line.size}): "
                    f"{accounted} sold, returned or defective but only {available} held"
                )

        with self._db.session() as session:
            rows = []
            for line in request.lines:
                product = product_repo.get_product(session, line.product_id)
                size_row = product.size_for(line.size) if product is not None else None
                if size_row is None:
                    raise ProductNotFound(f"{line.product_id} ({line.size})")
                rows.append(
                    {
                        **line.model_dump(),
                        "size": size_row.size,
                        "salesperson_id": request.salesperson_id,
                        "salesperson_name": request.salesperson_name,
                    }
                )
            logs = sales_repo.add_sales_logs(session, rows)

        total_sold = sum(line.qty_sold for line in request.lines)
        logger.info("sales_logs.created", salesperson_id=request.salesperson_id, lines=len(logs), total_sold=total_sold)
        self._activity.log_activity(
            f"Submitted daily sales log: {total_sold} units sold",
            request.salesperson_id,
            request.salesperson_name,
        )
        self._notifier.submit(
            "sales_logs.notify_admins",
            self._notify_admins,
            request.salesperson_name,
            total_sold,
            len(logs),
        )
        return logs

    def list_sales_logs(self, salesperson_id: Optional[str] = None, limit: int = 100) -> list[SalesLog]:
        with self._db.session() as session:
            return sales_repo.list_sales_logs(session, salesperson_id=salesperson_id, limit=limit)

    def _notify_admins(self, salesperson_name: str, total_sold: int, lines: int) -> None:
        subject, html = templates.sales_log_notice(salesperson_name, datetime.now(timezone.utc), total_sold, lines)
        self._staff_mail.send_to_roles(ADMIN_ROLES, subject, html)
