"""DB repositories: sync functions that take the caller's Session."""

from luna_ops.db.repositories import (
    activity_repo,
    attendance_repo,
    inventory_repo,
    material_repo,
    order_repo,
    partner_repo,
    product_repo,
    production_repo,
    purchase_order_repo,
    referral_repo,
    review_repo,
    sales_repo,
    user_repo,
)
from luna_ops.db.repositories.inventory_repo import inventory_key

__all__ = [
    "activity_repo",
    "attendance_repo",
    "inventory_key",
    "inventory_repo",
    "material_repo",
    "order_repo",
    "partner_repo",
    "product_repo",
    "production_repo",
    "purchase_order_repo",
    "referral_repo",
    "review_repo",
    "sales_repo",
    "user_repo",
]
