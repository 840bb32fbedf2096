"""Field sale, daily sales and reconciliation log repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import FieldSaleLog, ReconciliationLog, SalesLog


def add_field_sale_log(session: Session, **fields) -> FieldSaleLog:
    row = FieldSaleLog(**fields)
    session.add(row)
    session.flush()
    return row


def list_field_sale_logs(session: Session, salesperson_id: Optional[str] = None, limit: int = 100) -> list[FieldSaleLog]:
    q = select(FieldSaleLog).order_by(FieldSaleLog.created_at.desc()).limit(limit)
    if salesperson_id:
        q = q.where(FieldSaleLog.salesperson_id == salesperson_id)
    return list(session.scalars(q).all())


def add_reconciliation_logs(session: Session, rows: list[dict]) -> list[ReconciliationLog]:
    logs = [ReconciliationLog(**r) for r in rows]
    session.add_all(logs)
    session.flush()
    return logs


def list_reconciliation_logs(session: Session, salesperson_id: Optional[str] = None) -> list[ReconciliationLog]:
    q = select(ReconciliationLog).order_by(ReconciliationLog.created_at.desc())
    if salesperson_id:
        q = q.where(ReconciliationLog.salesperson_id == salesperson_id)
    return list(session.scalars(q).all())


def add_sales_logs(session: Session, rows: list[dict]) -> list[SalesLog]:
    logs = [SalesLog(**r) for r in rows]
    session.add_all(logs)
    session.flush()
    return logs


def list_sales_logs(session: Session, salesperson_id: Optional[str] = None, limit: int = 100) -> list[SalesLog]:
    q = select(SalesLog).order_by(SalesLog.created_at.desc()).limit(limit)
    if salesperson_id:
        q = q.where(SalesLog.salesperson_id == salesperson_id)
    return list(session.scalars(q).all())
