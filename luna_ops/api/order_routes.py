"""Order and finished-goods stock routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from luna_ops.api.deps import get_services
from luna_ops.db.repositories.inventory_repo import inventory_key
from luna_ops.models.catalog import OrderReviewCreate, ReviewOut
from luna_ops.models.orders import OrderOut, StatusUpdateRequest, StockOut, StockUpdate
from luna_ops.services.container import Services

router = APIRouter(tags=["orders"])


@router.get("/orders", response_model=list[OrderOut])
def list_orders(
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    services: Services = Depends(get_services),
):
    """Newest orders first."""
    return services.orders.list_orders(status=status, user_id=user_id, limit=limit)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: str, services: Services = Depends(get_services)):
    return services.orders.get_order(order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: str, body: StatusUpdateRequest, services: Services = Depends(get_services)):
    services.orders.update_status(order_id, body.status, user_id=body.user_id, user_name=body.user_name)
    return services.orders.get_order(order_id)


@router.post("/orders/{order_id}/review", response_model=ReviewOut, status_code=201)
def review_order(order_id: str, body: OrderReviewCreate, services: Services = Depends(get_services)):
    """Target of the link in the delivered-order e-mail."""
    return services.reviews.add_order_review(order_id, body.product_id, body.rating, body.comment)


@router.get("/inventory", response_model=list[StockOut])
def list_stock(product_id: Optional[str] = None, services: Services = Depends(get_services)):
    return services.inventory.list_stock(product_id=product_id)


@router.get("/inventory/{product_id}/{size}", response_model=StockOut)
def get_stock(product_id: str, size: str, services: Services = Depends(get_services)):
    return StockOut(
        key=inventory_key(product_id, size),
        product_id=product_id,
        size=size,
        quantity=services.inventory.get_stock(product_id, size),
    )


@router.put("/inventory/{product_id}/{size}", response_model=StockOut)
def set_stock(product_id: str, size: str, body: StockUpdate, services: Services = Depends(get_services)):
    """Admin stock override."""
    quantity = services.inventory.set_stock(product_id, size, body.quantity)
    return StockOut(key=inventory_key(product_id, size), product_id=product_id, size=size, quantity=quantity)
