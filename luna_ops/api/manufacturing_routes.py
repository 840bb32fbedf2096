"""Raw material, production run and purchase order routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from luna_ops.api.deps import get_services
from luna_ops.models.manufacturing import (
    IntakeOut,
    IntakeRequest,
    ProductionRunOut,
    ProductionRunRequest,
    RawMaterialCreate,
    RawMaterialOut,
)
from luna_ops.models.purchasing import PurchaseOrderCreate, PurchaseOrderOut
from luna_ops.services.container import Services

router = APIRouter(tags=["manufacturing"])


@router.get("/raw-materials", response_model=list[RawMaterialOut])
def list_raw_materials(services: Services = Depends(get_services)):
    return services.materials.list_materials()


@router.post("/raw-materials", response_model=RawMaterialOut, status_code=201)
def add_raw_material(body: RawMaterialCreate, services: Services = Depends(get_services)):
    return services.materials.add_material(body)


@router.post("/raw-materials/{material_id}/intakes", response_model=RawMaterialOut, status_code=201)
def log_intake(material_id: str, body: IntakeRequest, services: Services = Depends(get_services)):
    """Receive a delivery; returns the material with its new quantity."""
    services.materials.log_intake(material_id, body)
    return services.materials.get_material(material_id)


@router.get("/raw-materials/{material_id}/intakes", response_model=list[IntakeOut])
def list_intakes(material_id: str, limit: int = Query(100, ge=1, le=500), services: Services = Depends(get_services)):
    return services.materials.list_intakes(material_id, limit=limit)


@router.post("/manufacturing/runs", status_code=201)
def log_production_run(body: ProductionRunRequest, services: Services = Depends(get_services)) -> dict:
    result = services.manufacturing.log_production_run(
        body.product_id,
        body.size,
        body.quantity_produced,
        body.consumed_materials,
        body.operator_id,
        body.operator_name,
    )
    return {
        "finished_good_item_id": result.finished_good_item_id,
        "product_name": result.product_name,
        "finished_good_quantity": result.finished_good_quantity,
        "production_run_id": result.production_run_id,
        "consumed_materials": result.consumed,
    }


@router.get("/manufacturing/runs", response_model=list[ProductionRunOut])
def list_production_runs(limit: int = Query(50, ge=1, le=500), services: Services = Depends(get_services)):
    return services.manufacturing.list_production_runs(limit=limit)


@router.post("/purchase-orders", response_model=PurchaseOrderOut, status_code=201)
def create_purchase_order(body: PurchaseOrderCreate, services: Services = Depends(get_services)):
    return services.purchase_orders.create_purchase_order(body)


@router.get("/purchase-orders", response_model=list[PurchaseOrderOut])
def list_purchase_orders(status: Optional[str] = None, services: Services = Depends(get_services)):
    return services.purchase_orders.list_purchase_orders(status=status)
