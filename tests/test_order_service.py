"""Tests for order placement: atomicity, server-side totals, idempotency, notifications, status machine."""

import unittest

from support import RecordingMailer, ServiceTestCase

from luna_ops.db.models import Order, ProductSize
from luna_ops.db.repositories import order_repo
from luna_ops.exceptions import (
    ImmutableRecordError,
    InsufficientStock,
    InvalidStatusTransition,
    OrderNotFound,
    ProductNotFound,
    ValidationError,
)
from luna_ops.models.cart import CartItem, DeliveryMethod
from luna_ops.services.order_service import STATUS_TRANSITIONS


class TestPlaceOrder(ServiceTestCase):
    def setUp(self):
        super().setUp()
        self.dish = self.create_product("Dish Wash", sizes=(("500ml", 250.0), ("1 L", 450.0)), delivery_fee=200.0, platform_fee=20.0)
        self.soap = self.create_product("Hand Soap", sizes=(("250ml", 180.0),), delivery_fee=150.0, platform_fee=10.0)

    def _order_count(self) -> int:
        with self.db.session() as session:
            return session.query(Order).count()

    def test_order_created_and_stock_decremented(self):
        self.stock(self.dish, "1 L", 10)
        order_id = self.services.orders.place_order(
            self.customer(), [self.item(self.dish, "1 L", 3)], "ref-001", user_id="cust-1"
        )
        order = self.services.orders.get_order(order_id)
        self.assertEqual(order.status, "paid")
        self.assertEqual(order.paystack_reference, "ref-001")
        self.assertEqual(order.user_id, "cust-1")
        self.assertEqual(len(order.items), 1)
        self.assertEqual(order.items[0].size, "1 L")
        self.assertEqual(self.services.inventory.get_stock(self.dish.id, "1L"), 7)

    def test_over_order_aborts_without_effect(self):
        self.stock(self.dish, "500ml", 2)
        with self.assertRaises(InsufficientStock) as ctx:
            self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 3)], "ref-002")
        self.assertIn("Dish Wash (500ml)", str(ctx.exception))
        self.assertIn("Only 2 left", str(ctx.exception))
        self.assertEqual(self._order_count(), 0)
        self.assertEqual(self.services.inventory.get_stock(self.dish.id, "500ml"), 2)

    def test_multi_line_order_is_all_or_nothing(self):
        self.stock(self.dish, "500ml", 10)
        self.stock(self.soap, "250ml", 1)
        items = [self.item(self.dish, "500ml", 4), self.item(self.soap, "250ml", 2)]
        with self.assertRaises(InsufficientStock) as ctx:
            self.services.orders.place_order(self.customer(), items, "ref-003")
        self.assertIn("Hand Soap (250ml)", str(ctx.exception))
        self.assertEqual(self._order_count(), 0)
        self.assertEqual(self.services.inventory.get_stock(self.dish.id, "500ml"), 10)
        self.assertEqual(self.services.inventory.get_stock(self.soap.id, "250ml"), 1)

    def test_repeated_sku_lines_are_checked_cumulatively(self):
        self.stock(self.dish, "500ml", 3)
        items = [self.item(self.dish, "500ml", 2), self.item(self.dish, "500ml", 2)]
        with self.assertRaises(InsufficientStock):
            self.services.orders.place_order(self.customer(), items, "ref-004")
        self.assertEqual(self.services.inventory.get_stock(self.dish.id, "500ml"), 3)

    def test_missing_inventory_entry_names_item(self):
        with self.db.session() as session:
            session.add(ProductSize(product_id=self.dish.id, size="2L", price=800.0))
        with self.assertRaises(InsufficientStock) as ctx:
            self.services.orders.place_order(self.customer(), [self.item(self.dish, "2L", 1)], "ref-005")
        self.assertEqual(str(ctx.exception), "Inventory for Dish Wash (2L) not found.")
        self.assertEqual(self._order_count(), 0)

    def test_unknown_product_or_size(self):
        with self.assertRaises(ProductNotFound):
            self.services.orders.place_order(
                self.customer(), [CartItem(product_id="nope", size="1L", quantity=1)], "ref-006"
            )
        with self.assertRaises(ProductNotFound):
            self.services.orders.place_order(
                self.customer(), [CartItem(product_id=self.dish.id, size="5L", quantity=1)], "ref-007"
            )
        self.assertEqual(self._order_count(), 0)

    def test_empty_cart_rejected(self):
        with self.assertRaises(ValidationError):
            self.services.orders.place_order(self.customer(), [], "ref-008")

    def test_client_prices_and_total_are_ignored(self):
        self.stock(self.dish, "1 L", 5)
        self.stock(self.dish, "500ml", 5)
        self.stock(self.soap, "250ml", 5)
        items = [
            self.item(self.dish, "1 L", 2, price=1.0),
            self.item(self.dish, "500ml", 1, price=1.0),
            self.item(self.soap, "250ml", 1, price=1.0),
        ]
        order_id = self.services.orders.place_order(self.customer(), items, "ref-009", client_total=3.0)
        order = self.services.orders.get_order(order_id)
        self.assertEqual(order.subtotal, 2 * 450.0 + 250.0 + 180.0)
        # Fees once per distinct product
        self.assertEqual(order.delivery_fee, 200.0 + 150.0)
        self.assertEqual(order.platform_fee, 20.0 + 10.0)
        self.assertEqual(order.total_amount, 1330.0 + 350.0 + 30.0)
        self.assertEqual([i.unit_price for i in order.items], [450.0, 250.0, 180.0])

    def test_pickup_skips_delivery_fee(self):
        self.stock(self.dish, "500ml", 5)
        order_id = self.services.orders.place_order(
            self.customer(delivery_method=DeliveryMethod.PICKUP), [self.item(self.dish, "500ml", 1)], "ref-010"
        )
        order = self.services.orders.get_order(order_id)
        self.assertEqual(order.delivery_fee, 0.0)
        self.assertEqual(order.platform_fee, 20.0)
        self.assertEqual(order.total_amount, 270.0)

    def test_same_reference_returns_existing_order(self):
        self.stock(self.dish, "500ml", 5)
        first = self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 2)], "ref-011")
        self.services.notifier.drain()
        sent_before = len(self.mailer.sent)
        second = self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 2)], "ref-011")
        self.services.notifier.drain()
        self.assertEqual(first, second)
        self.assertEqual(self._order_count(), 1)
        self.assertEqual(self.services.inventory.get_stock(self.dish.id, "500ml"), 3)
        self.assertEqual(len(self.mailer.sent), sent_before)

    def test_notifications_sent_after_commit(self):
        self.services.users.add_user("ops@luna.co.ke", "Ops Desk", ["admin"])
        self.services.users.add_user("brian@luna.co.ke", "Brian", ["sales"])
        self.services.users.add_user("factory@luna.co.ke", "Factory", ["manufacturing"])
        self.stock(self.dish, "500ml", 5)
        self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 1)], "ref-012")
        self.services.notifier.drain()
        recipients = self.mailer.recipients()
        self.assertIn("wanjiku.kamau@gmail.com", recipients)
        self.assertIn("ops@luna.co.ke", recipients)
        self.assertIn("brian@luna.co.ke", recipients)
        self.assertNotIn("factory@luna.co.ke", recipients)
        customer_mail = next(m for m in self.mailer.sent if m["to"] == ["wanjiku.kamau@gmail.com"])
        self.assertEqual(customer_mail["from"], "sales@luna.co.ke")
        self.assertIn("confirmed", customer_mail["subject"])

    def test_mail_failure_does_not_fail_order(self):
        self.services.orders._mailer = RecordingMailer(fail=True)
        self.stock(self.dish, "500ml", 5)
        order_id = self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 1)], "ref-013")
        self.services.notifier.drain()
        self.assertEqual(self.services.orders.get_order(order_id).status, "paid")
        self.assertEqual(self.services.inventory.get_stock(self.dish.id, "500ml"), 4)

    def test_order_fields_are_immutable(self):
        self.stock(self.dish, "500ml", 5)
        order_id = self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 1)], "ref-014")
        with self.assertRaises(ImmutableRecordError):
            with self.db.session() as session:
                order = order_repo.get_order(session, order_id)
                order.total_amount = 1.0
                session.flush()
        self.assertEqual(self.services.orders.get_order(order_id).total_amount, 470.0)

    def test_list_orders_filters(self):
        self.stock(self.dish, "500ml", 5)
        a = self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 1)], "ref-a", user_id="sp-1")
        self.services.orders.place_order(self.customer(), [self.item(self.dish, "500ml", 1)], "ref-b", user_id="sp-2")
        self.assertEqual([o.id for o in self.services.orders.list_orders(user_id="sp-1")], [a])
        self.assertEqual(len(self.services.orders.list_orders(status="paid")), 2)


class TestOrderStatus(ServiceTestCase):
    def setUp(self):
        super().setUp()
        self.dish = self.create_product()
        self.stock(self.dish, "500ml", 10)
        self.order_id = self.services.orders.place_order(
            self.customer(), [self.item(self.dish, "500ml", 1)], "ref-status"
        )
        self.services.notifier.drain()
        self.mailer.sent.clear()

    def _advance(self, *statuses):
        for s in statuses:
            self.services.orders.update_status(self.order_id, s, user_id="adm-1", user_name="Achieng")

    def test_happy_path_to_delivered_sends_review_request(self):
        self._advance("processing", "ready-for-dispatch", "shipped", "delivered")
        self.services.notifier.drain()
        self.assertEqual(self.services.orders.get_order(self.order_id).status, "delivered")
        self.assertEqual(len(self.mailer.sent), 1)
        self.assertEqual(self.mailer.sent[0]["to"], ["wanjiku.kamau@gmail.com"])
        self.assertIn("review", self.mailer.sent[0]["html"].lower())

    def test_each_change_is_logged_as_activity(self):
        self._advance("processing", "cancelled")
        descriptions = [a.description for a in self.services.activity.recent_activities()]
        self.assertTrue(any("paid to processing" in d for d in descriptions))
        self.assertTrue(any("processing to cancelled" in d for d in descriptions))

    def test_cannot_skip_states(self):
        with self.assertRaises(InvalidStatusTransition) as ctx:
            self._advance("shipped")
        self.assertEqual(ctx.exception.current, "paid")
        self.assertEqual(ctx.exception.status_code, 422)

    def test_terminal_states_have_no_exits(self):
        self._advance("cancelled")
        with self.assertRaises(InvalidStatusTransition):
            self._advance("processing")
        for terminal in ("delivered", "cancelled", "returned"):
            self.assertEqual(STATUS_TRANSITIONS[terminal], frozenset())

    def test_return_branch_and_alias(self):
        self._advance("processing", "ready-for-dispatch", "shipped", "return-pending", "return-returned")
        self.assertEqual(self.services.orders.get_order(self.order_id).status, "returned")

    def test_cannot_cancel_after_shipping(self):
        self._advance("processing", "ready-for-dispatch", "shipped")
        with self.assertRaises(InvalidStatusTransition):
            self._advance("cancelled")

    def test_unknown_status_and_order(self):
        with self.assertRaises(ValidationError):
            self._advance("teleported")
        with self.assertRaises(OrderNotFound):
            self.services.orders.update_status("missing", "processing")


if __name__ == "__main__":
    unittest.main()
