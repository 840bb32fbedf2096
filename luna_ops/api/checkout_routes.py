"""Checkout, field sale, daily sales log and reconciliation routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from luna_ops.api.deps import get_services
from luna_ops.models.orders import PlaceOrderResponse
from luna_ops.models.payments import (
    InitializeCheckoutRequest,
    InitializeCheckoutResponse,
    VerifyCheckoutRequest,
)
from luna_ops.models.sales import (
    FieldSaleLogOut,
    FieldSaleRequest,
    FieldSaleResponse,
    ReconciliationLogOut,
    ReconciliationRequest,
    SalesLogOut,
    SalesLogRequest,
)
from luna_ops.services.container import Services

router = APIRouter(tags=["checkout"])


@router.post("/checkout/initialize", response_model=InitializeCheckoutResponse)
def initialize_checkout(body: InitializeCheckoutRequest, services: Services = Depends(get_services)):
    """Open a hosted payment for the server-priced cart."""
    return services.checkout.initialize_checkout(body.items, body.customer, body.user_id, body.client_total)


@router.post("/checkout/verify", response_model=PlaceOrderResponse, status_code=201)
def verify_checkout(body: VerifyCheckoutRequest, services: Services = Depends(get_services)):
    """Verify a completed payment with the gateway and place the order."""
    order_id = services.checkout.verify_and_place_order(
        body.reference, body.items, body.customer, body.user_id, body.client_total
    )
    return PlaceOrderResponse(order_id=order_id)


@router.post("/sales/field", response_model=FieldSaleResponse, status_code=201)
def field_sale(body: FieldSaleRequest, services: Services = Depends(get_services)):
    """Push an M-Pesa charge to the customer's phone and wait for it (blocks up to about a minute)."""
    return services.field_sales.process_field_sale(body)


@router.get("/sales/field", response_model=list[FieldSaleLogOut])
def list_field_sales(
    salesperson_id: Optional[str] = None,
    limit: int = 100,
    services: Services = Depends(get_services),
):
    return services.field_sales.list_field_sales(salesperson_id=salesperson_id, limit=limit)


@router.post("/reconciliations", response_model=list[ReconciliationLogOut], status_code=201)
def create_reconciliation(body: ReconciliationRequest, services: Services = Depends(get_services)):
    return services.reconciliation.create_reconciliation_logs(body)


@router.get("/reconciliations", response_model=list[ReconciliationLogOut])
def list_reconciliations(salesperson_id: Optional[str] = None, services: Services = Depends(get_services)):
    return services.reconciliation.list_reconciliation_logs(salesperson_id=salesperson_id)


@router.post("/sales/logs", response_model=list[SalesLogOut], status_code=201)
def create_sales_logs(body: SalesLogRequest, services: Services = Depends(get_services)):
    """Salesperson's end-of-day log; admins get a summary e-mail."""
    return services.sales_logs.create_sales_logs(body)


@router.get("/sales/logs", response_model=list[SalesLogOut])
def list_sales_logs(
    salesperson_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    services: Services = Depends(get_services),
):
    return services.sales_logs.list_sales_logs(salesperson_id=salesperson_id, limit=limit)
