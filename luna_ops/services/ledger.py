"""Stock ledgers for finished goods and raw materials.

Mutations take the caller's Session so they commit or roll back together with
the rest of the enclosing transaction (order placement, production run,
intake). Rows carry an optimistic ``version_id``; a lost race surfaces at
commit and is retried by ``Database.run_transaction``.
"""

from typing import Optional

from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.models import InventoryEntry, RawMaterial
from luna_ops.db.repositories import inventory_repo, material_repo
from luna_ops.db.repositories.inventory_repo import inventory_key
from luna_ops.exceptions import InsufficientStock, MaterialNotFound, ValidationError
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.ledger")

# Float quantities within this distance of zero count as zero
_EPSILON = 1e-9


def _split_key(key: str) -> tuple[str, str]:
    product_id, _, size = key.partition("-")
    return product_id, size


class InventoryLedger:
    """Finished-goods stock counters keyed ``productId-size``."""

    def __init__(self, db: Database):
        self._db = db

    @staticmethod
    def decrement(session: Session, key: str, amount: int, label: Optional[str] = None) -> int:
        """Take ``amount`` units from ``key``. Raises InsufficientStock if the entry is missing or short."""
        if amount <= 0:
            raise ValidationError(f"Decrement amount must be positive, got {amount}")
        label = label or key
        entry = inventory_repo.get_entry(session, key)
        if entry is None:
            raise InsufficientStock(label, amount, None)
        if entry.quantity < amount:
            raise InsufficientStock(label, amount, entry.quantity)
        entry.quantity = entry.quantity - amount
        return entry.quantity

    @staticmethod
    def increment(
        session: Session,
        key: str,
        amount: int,
        product_id: Optional[str] = None,
        size: Optional[str] = None,
    ) -> int:
        """Add ``amount`` units to ``key``, creating the entry when it does not exist."""
        if amount <= 0:
            raise ValidationError(f"Increment amount must be positive, got {amount}")
        entry = inventory_repo.get_entry(session, key)
        if entry is None:
            parsed_product, parsed_size = _split_key(key)
            entry = inventory_repo.create_entry(
                session, key, product_id or parsed_product, size or parsed_size, amount
            )
            session.flush()
            return entry.quantity
        entry.quantity = entry.quantity + amount
        return entry.quantity

    def get_stock(self, product_id: str, size: str) -> int:
        """Current quantity for a SKU; 0 when no entry exists."""
        with self._db.session() as session:
            entry = inventory_repo.get_entry(session, inventory_key(product_id, size))
            return entry.quantity if entry is not None else 0

    def get_entry(self, product_id: str, size: str) -> Optional[InventoryEntry]:
        with self._db.session() as session:
            return inventory_repo.get_entry(session, inventory_key(product_id, size))

    def list_stock(self, product_id: Optional[str] = None) -> list[InventoryEntry]:
        with self._db.session() as session:
            return inventory_repo.list_entries(session, product_id=product_id)

    def set_stock(self, product_id: str, size: str, quantity: int) -> int:
        """Admin override: write ``quantity`` as-is (negative values allowed)."""
        key = inventory_key(product_id, size)

        def _write(session: Session) -> int:
            entry = inventory_repo.get_entry(session, key)
            if entry is None:
                inventory_repo.create_entry(session, key, product_id, size, quantity)
            else:
                entry.quantity = quantity
            return quantity

        self._db.run_transaction(_write, name="inventory.set_stock")
        logger.warning("inventory.set_stock.override", key=key, quantity=quantity)
        return quantity


class RawMaterialLedger:
    """Raw material stock counters keyed by material id."""

    def __init__(self, db: Database):
        self._db = db

    @staticmethod
    def decrement(session: Session, material_id: str, amount: float, label: Optional[str] = None) -> RawMaterial:
        """Consume ``amount`` of a material. Raises MaterialNotFound or InsufficientStock; never goes negative."""
        if amount <= 0:
            raise ValidationError(f"Consumed quantity must be positive, got {amount}")
        material = material_repo.get_material(session, material_id)
        if material is None:
            raise MaterialNotFound(material_id)
        remaining = material.quantity - amount
        if remaining < -_EPSILON:
            raise InsufficientStock(
                f"{label or material.name} ({material.unit_of_measure})", amount, material.quantity
            )
        material.quantity = max(remaining, 0.0)
        return material

    @staticmethod
    def increment(session: Session, material_id: str, amount: float) -> RawMaterial:
        if amount <= 0:
            raise ValidationError(f"Received quantity must be positive, got {amount}")
        material = material_repo.get_material(session, material_id)
        if material is None:
            raise MaterialNotFound(material_id)
        material.quantity = material.quantity + amount
        return material

    def get_quantity(self, material_id: str) -> float:
        with self._db.session() as session:
            material = material_repo.get_material(session, material_id)
            if material is None:
                raise MaterialNotFound(material_id)
            return material.quantity
