"""Tests for the inventory and raw material ledgers."""

import unittest

from support import ServiceTestCase

from luna_ops.db.models import RawMaterial
from luna_ops.db.repositories import inventory_key
from luna_ops.exceptions import InsufficientStock, MaterialNotFound
from luna_ops.models.manufacturing import RawMaterialCreate
from luna_ops.services.ledger import InventoryLedger, RawMaterialLedger


class TestInventoryKey(unittest.TestCase):
    def test_whitespace_removed_from_size(self):
        self.assertEqual(inventory_key("prod1", "1 L"), "prod1-1L")
        self.assertEqual(inventory_key("prod1", " 500 ml "), "prod1-500ml")
        self.assertEqual(inventory_key("prod1", "500ml"), "prod1-500ml")


class TestInventoryLedger(ServiceTestCase):
    def test_get_stock_is_zero_when_entry_missing(self):
        self.assertEqual(self.services.inventory.get_stock("nope", "1L"), 0)

    def test_decrement_missing_entry_names_item(self):
        with self.assertRaises(InsufficientStock) as ctx:
            self.db.run_transaction(lambda s: InventoryLedger.decrement(s, "ghost-1L", 1, "Ghost (1L)"))
        self.assertEqual(str(ctx.exception), "Inventory for Ghost (1L) not found.")
        self.assertIsNone(ctx.exception.available)

    def test_decrement_short_reports_available(self):
        self.services.inventory.set_stock("p1", "1L", 2)
        with self.assertRaises(InsufficientStock) as ctx:
            self.db.run_transaction(lambda s: InventoryLedger.decrement(s, "p1-1L", 3, "Dish Wash (1L)"))
        self.assertEqual(str(ctx.exception), "Not enough stock for Dish Wash (1L). Only 2 left.")
        self.assertEqual(self.services.inventory.get_stock("p1", "1L"), 2)

    def test_decrement_exact_amount_reaches_zero(self):
        self.services.inventory.set_stock("p1", "1L", 3)
        remaining = self.db.run_transaction(lambda s: InventoryLedger.decrement(s, "p1-1L", 3, "x"))
        self.assertEqual(remaining, 0)
        self.assertEqual(self.services.inventory.get_stock("p1", "1L"), 0)

    def test_increment_creates_missing_entry(self):
        qty = self.db.run_transaction(lambda s: InventoryLedger.increment(s, "p9-500ml", 12))
        self.assertEqual(qty, 12)
        entry = self.services.inventory.get_entry("p9", "500ml")
        self.assertEqual(entry.product_id, "p9")
        self.assertEqual(entry.size, "500ml")
        self.assertEqual(entry.quantity, 12)

    def test_increment_adds_to_existing_entry(self):
        self.services.inventory.set_stock("p1", "1L", 5)
        self.db.run_transaction(lambda s: InventoryLedger.increment(s, "p1-1L", 7))
        self.assertEqual(self.services.inventory.get_stock("p1", "1L"), 12)

    def test_version_bumps_on_each_write(self):
        self.services.inventory.set_stock("p1", "1L", 5)
        v1 = self.services.inventory.get_entry("p1", "1L").version_id
        self.db.run_transaction(lambda s: InventoryLedger.increment(s, "p1-1L", 1))
        v2 = self.services.inventory.get_entry("p1", "1L").version_id
        self.assertGreater(v2, v1)

    def test_admin_override_allows_negative(self):
        self.services.inventory.set_stock("p1", "1L", -4)
        self.assertEqual(self.services.inventory.get_stock("p1", "1L"), -4)


class TestRawMaterialLedger(ServiceTestCase):
    def _material(self, name="SLES 70", quantity=10.0) -> RawMaterial:
        return self.services.materials.add_material(
            RawMaterialCreate(name=name, unit_of_measure="kg", quantity=quantity)
        )

    def test_decrement_below_zero_rejected_and_unchanged(self):
        m = self._material(quantity=5.0)
        with self.assertRaises(InsufficientStock) as ctx:
            self.db.run_transaction(lambda s: RawMaterialLedger.decrement(s, m.id, 5.5))
        self.assertIn("SLES 70 (kg)", str(ctx.exception))
        self.assertEqual(self.services.raw_materials.get_quantity(m.id), 5.0)

    def test_decrement_to_exactly_zero(self):
        m = self._material(quantity=2.5)
        self.db.run_transaction(lambda s: RawMaterialLedger.decrement(s, m.id, 2.5))
        self.assertEqual(self.services.raw_materials.get_quantity(m.id), 0.0)

    def test_missing_material(self):
        with self.assertRaises(MaterialNotFound):
            self.db.run_transaction(lambda s: RawMaterialLedger.decrement(s, "missing", 1.0))

    def test_increment(self):
        m = self._material(quantity=1.0)
        self.db.run_transaction(lambda s: RawMaterialLedger.increment(s, m.id, 24.0))
        self.assertEqual(self.services.raw_materials.get_quantity(m.id), 25.0)


if __name__ == "__main__":
    unittest.main()
