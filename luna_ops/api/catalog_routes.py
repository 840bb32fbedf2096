"""Product catalogue and product review routes."""

from fastapi import APIRouter, Depends, Query

from luna_ops.api.deps import get_services
from luna_ops.models.catalog import ProductCreate, ProductOut, ReviewCreate, ReviewOut
from luna_ops.services.container import Services

router = APIRouter(prefix="/products", tags=["catalog"])


@router.post("", response_model=ProductOut, status_code=201)
def create_product(body: ProductCreate, services: Services = Depends(get_services)):
    return services.catalog.create_product(body)


@router.get("", response_model=list[ProductOut])
def list_products(active_only: bool = False, services: Services = Depends(get_services)):
    return services.catalog.list_products(active_only=active_only)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, services: Services = Depends(get_services)):
    return services.catalog.get_product(product_id)


@router.post("/{product_id}/reviews", response_model=ReviewOut, status_code=201)
def add_review(product_id: str, body: ReviewCreate, services: Services = Depends(get_services)):
    return services.reviews.add_review(product_id, body.user_id, body.user_name, body.rating, body.comment)


@router.get("/{product_id}/reviews", response_model=list[ReviewOut])
def list_reviews(product_id: str, limit: int = Query(100, ge=1, le=500), services: Services = Depends(get_services)):
    return services.reviews.list_reviews(product_id, limit=limit)
