"""Re-export all ORM models so Base.metadata has all tables."""

from luna_ops.db.models.activity import ActivityLog
from luna_ops.db.models.attendance import AttendanceRecord
from luna_ops.db.models.catalog import Product, ProductSize, Review
from luna_ops.db.models.inventory import InventoryEntry
from luna_ops.db.models.materials import UNITS_OF_MEASURE, RawMaterial, RawMaterialIntake
from luna_ops.db.models.orders import Order, OrderItem
from luna_ops.db.models.partners import APPLICATION_STATUSES, PARTNER_TYPES, PartnerApplication
from luna_ops.db.models.production import ProductionRun, ProductionRunMaterial
from luna_ops.db.models.purchasing import PURCHASE_ORDER_STATUSES, PurchaseOrder, PurchaseOrderItem
from luna_ops.db.models.referral import ReferralLink
from luna_ops.db.models.sales import FieldSaleLog, ReconciliationLog, SalesLog
from luna_ops.db.models.user import KNOWN_ROLES, PARTNER_ROLES, STAFF_ROLES, User

__all__ = [
    "APPLICATION_STATUSES",
    "ActivityLog",
    "AttendanceRecord",
    "FieldSaleLog",
    "InventoryEntry",
    "KNOWN_ROLES",
    "Order",
    "OrderItem",
    "PARTNER_ROLES",
    "PARTNER_TYPES",
    "PURCHASE_ORDER_STATUSES",
    "PartnerApplication",
    "Product",
    "ProductSize",
    "ProductionRun",
    "ProductionRunMaterial",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "RawMaterial",
    "RawMaterialIntake",
    "ReconciliationLog",
    "ReferralLink",
    "Review",
    "STAFF_ROLES",
    "SalesLog",
    "UNITS_OF_MEASURE",
    "User",
]
