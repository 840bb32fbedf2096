"""Tests for product reviews and the running product rating."""

import unittest

from support import ServiceTestCase

from luna_ops.exceptions import OrderNotFound, ProductNotFound, ValidationError


class TestReviews(ServiceTestCase):
    def setUp(self):
        super().setUp()
        self.dish = self.create_product()
        self.soap = self.create_product("Hand Soap", sizes=(("250ml", 180.0),))
        self.stock(self.dish, "500ml", 10)
        self.order_id = self.services.orders.place_order(
            self.customer(), [self.item(self.dish, "500ml", 1)], "ref-review", user_id="cust-3"
        )

    def _deliver(self):
        for status in ("processing", "ready-for-dispatch", "shipped", "delivered"):
            self.services.orders.update_status(self.order_id, status)

    def test_rating_is_running_average(self):
        self.services.reviews.add_review(self.dish.id, "u1", "Wanjiku", 5, "Cuts grease fast")
        self.services.reviews.add_review(self.dish.id, "u2", "Otieno", 2)
        product = self.services.catalog.get_product(self.dish.id)
        self.assertEqual(product.review_count, 2)
        self.assertAlmostEqual(product.rating, 3.5)
        reviews = self.services.reviews.list_reviews(self.dish.id)
        self.assertEqual([r.user_name for r in reviews], ["Otieno", "Wanjiku"])
        self.assertEqual(self.services.reviews.list_reviews(self.soap.id), [])

    def test_rating_out_of_range(self):
        for rating in (0, 6):
            with self.subTest(rating=rating):
                with self.assertRaises(ValidationError):
                    self.services.reviews.add_review(self.dish.id, "u1", "Wanjiku", rating)
        self.assertEqual(self.services.catalog.get_product(self.dish.id).review_count, 0)

    def test_unknown_product(self):
        with self.assertRaises(ProductNotFound):
            self.services.reviews.add_review("nope", "u1", "Wanjiku", 4)

    def test_order_review_uses_order_customer(self):
        self._deliver()
        review = self.services.reviews.add_order_review(self.order_id, self.dish.id, 4, "Smells lovely")
        self.assertEqual((review.user_id, review.user_name), ("cust-3", "Wanjiku Kamau"))
        self.assertEqual(review.order_id, self.order_id)
        self.assertAlmostEqual(self.services.catalog.get_product(self.dish.id).rating, 4.0)

    def test_order_review_rules(self):
        with self.assertRaises(ValidationError):
            self.services.reviews.add_order_review(self.order_id, self.dish.id, 4)
        self._deliver()
        with self.assertRaises(ValidationError):
            self.services.reviews.add_order_review(self.order_id, self.soap.id, 4)
        self.services.reviews.add_order_review(self.order_id, self.dish.id, 4)
        with self.assertRaises(ValidationError):
            self.services.reviews.add_order_review(self.order_id, self.dish.id, 1)
        with self.assertRaises(OrderNotFound):
            self.services.reviews.add_order_review("missing", self.dish.id, 4)
        product = self.services.catalog.get_product(self.dish.id)
        self.assertEqual((product.review_count, product.rating), (1, 4.0))


if __name__ == "__main__":
    unittest.main()
