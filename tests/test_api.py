"""Tests for the HTTP API: error mapping, short links, webhook signatures, core routes."""

import json
import unittest

from fastapi.testclient import TestClient

from support import PAYSTACK_SECRET, ServiceTestCase

from luna_ops.api.server import create_app
from luna_ops.models.referrals import ReferralCreate
from luna_ops.payments import compute_signature


class ApiTestCase(ServiceTestCase):
    def setUp(self):
        super().setUp()
        self.client = TestClient(create_app(services=self.services))

    def _customer_json(self, **overrides):
        return json.loads(self.customer(**overrides).model_dump_json())


class TestHealthAndErrors(ApiTestCase):
    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_not_found_rendered_with_error_code(self):
        resp = self.client.get("/orders/missing")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error_code"], "NOT_FOUND")
        self.assertIn("missing", resp.json()["message"])


class TestReferralRedirect(ApiTestCase):
    def test_redirect_counts_click(self):
        link = self.services.referrals.create_referral_link(
            ReferralCreate(destination_url="https://shop.luna.co.ke/products/dish-wash", marketer_id="mk-1", marketer_name="Faith")
        )
        resp = self.client.get(f"/r/{link.code}", follow_redirects=False)
        self.assertEqual(resp.status_code, 307)
        self.assertEqual(resp.headers["location"], "https://shop.luna.co.ke/products/dish-wash")
        self.client.get(f"/r/{link.code}", follow_redirects=False)
        self.assertEqual(self.services.referrals.list_by_marketer("mk-1")[0].click_count, 2)

    def test_unknown_code(self):
        resp = self.client.get("/r/zzzzzzz", follow_redirects=False)
        self.assertEqual(resp.status_code, 404)


class TestPaystackWebhook(ApiTestCase):
    def _post(self, body: bytes, signature=None):
        headers = {"content-type": "application/json"}
        if signature is not None:
            headers["x-paystack-signature"] = signature
        return self.client.post("/webhooks/paystack", content=body, headers=headers)

    def test_valid_signature_accepted(self):
        body = json.dumps({"event": "charge.success", "data": {"reference": "T-1", "amount": 47000}}).encode()
        resp = self._post(body, compute_signature(PAYSTACK_SECRET, body))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"received": True})

    def test_charge_success_for_existing_order(self):
        dish = self.create_product()
        self.stock(dish, "500ml", 2)
        self.services.orders.place_order(self.customer(), [self.item(dish, "500ml", 1)], "T-2")
        for event in ("charge.success", "transfer.success"):
            with self.subTest(event=event):
                body = json.dumps({"event": event, "data": {"reference": "T-2"}}).encode()
                resp = self._post(body, compute_signature(PAYSTACK_SECRET, body))
                self.assertEqual(resp.status_code, 200)
                self.assertEqual(resp.json(), {"received": True})

    def test_missing_signature(self):
        self.assertEqual(self._post(b'{"event":"charge.success","data":{}}').status_code, 400)

    def test_bad_signature(self):
        body = b'{"event":"charge.success","data":{}}'
        self.assertEqual(self._post(body, compute_signature("sk_other", body)).status_code, 401)

    def test_no_secret_configured(self):
        self.services.paystack_secret_key = ""
        body = b'{"event":"charge.success","data":{}}'
        resp = self._post(body, "deadbeef")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error_code"], "CONFIGURATION_ERROR")


class TestOrderAndInventoryRoutes(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.dish = self.create_product()

    def test_inventory_override_and_read(self):
        resp = self.client.put(f"/inventory/{self.dish.id}/500ml", json={"quantity": 12})
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/inventory/{self.dish.id}/500ml")
        self.assertEqual(resp.json()["quantity"], 12)
        self.assertEqual(resp.json()["key"], f"{self.dish.id}-500ml")

        listed = self.client.get("/inventory", params={"product_id": self.dish.id}).json()
        self.assertEqual({e["size"]: e["quantity"] for e in listed}, {"500ml": 12, "1 L": 0})

    def test_verify_checkout_insufficient_stock_is_409(self):
        self.stock(self.dish, "500ml", 1)
        body = {
            "reference": "T-9",
            "items": [{"product_id": self.dish.id, "size": "500ml", "quantity": 2}],
            "customer": self._customer_json(),
        }
        resp = self.client.post("/checkout/verify", json=body)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error_code"], "INSUFFICIENT_STOCK")

    def test_verify_checkout_then_status_patch(self):
        self.stock(self.dish, "500ml", 5)
        body = {
            "reference": "T-10",
            "items": [{"product_id": self.dish.id, "size": "500ml", "quantity": 1, "price": 0.01}],
            "customer": self._customer_json(),
            "client_total": 0.01,
        }
        resp = self.client.post("/checkout/verify", json=body)
        self.assertEqual(resp.status_code, 201)
        order_id = resp.json()["order_id"]

        order = self.client.get(f"/orders/{order_id}").json()
        self.assertEqual(order["total_amount"], 470.0)

        resp = self.client.patch(f"/orders/{order_id}/status", json={"status": "delivered"})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error_code"], "VALIDATION_ERROR")

        resp = self.client.patch(f"/orders/{order_id}/status", json={"status": "processing", "user_id": "adm", "user_name": "Achieng"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "processing")

    def test_payment_not_confirmed_is_402(self):
        self.gateway.verify_response = {"status": True, "data": {"status": "failed"}}
        body = {
            "reference": "T-11",
            "items": [{"product_id": self.dish.id, "size": "500ml", "quantity": 1}],
            "customer": self._customer_json(),
        }
        resp = self.client.post("/checkout/verify", json=body)
        self.assertEqual(resp.status_code, 402)
        self.assertEqual(resp.json()["error_code"], "PAYMENT_NOT_CONFIRMED")


class TestManufacturingRoutes(ApiTestCase):
    def test_materials_intake_and_run(self):
        dish = self.create_product()
        resp = self.client.post("/raw-materials", json={"name": "Water", "unit_of_measure": "L"})
        self.assertEqual(resp.status_code, 201)
        water_id = resp.json()["id"]

        resp = self.client.post(
            f"/raw-materials/{water_id}/intakes",
            json={"supplier": "Nairobi Water", "delivery_note_id": "DN-1", "quantity_on_note": 100, "actual_quantity": 98, "received_by": "Otieno"},
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["quantity"], 98.0)

        intakes = self.client.get(f"/raw-materials/{water_id}/intakes").json()
        self.assertEqual(len(intakes), 1)
        self.assertEqual(intakes[0]["delivery_note_id"], "DN-1")
        self.assertEqual(intakes[0]["quantity_on_note"], 100.0)

        run = {
            "product_id": dish.id,
            "size": "500ml",
            "quantity_produced": 30,
            "consumed_materials": [{"raw_material_id": water_id, "quantity": 15}],
            "operator_id": "op-1",
            "operator_name": "Otieno",
        }
        resp = self.client.post("/manufacturing/runs", json=run)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["finished_good_quantity"], 30)
        self.assertEqual(resp.json()["finished_good_item_id"], f"{dish.id}-500ml")
        self.assertEqual(resp.json()["product_name"], "Dish Wash 500ml")

        run["consumed_materials"] = [{"raw_material_id": water_id, "quantity": 500}]
        resp = self.client.post("/manufacturing/runs", json=run)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error_code"], "PRODUCTION_RUN_FAILED")
        self.assertTrue(resp.json()["message"].startswith("Failed to log production run:"))

        runs = self.client.get("/manufacturing/runs").json()
        self.assertEqual(len(runs), 1)
        self.assertEqual(runs[0]["consumed_materials"][0]["raw_material_name"], "Water")

        run["size"] = "5L"
        run["consumed_materials"] = [{"raw_material_id": water_id, "quantity": 1}]
        resp = self.client.post("/manufacturing/runs", json=run)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.services.raw_materials.get_quantity(water_id), 83.0)


class TestPartnerRoutes(ApiTestCase):
    def test_apply_list_and_approve(self):
        body = {
            "name": "Faith Njeri",
            "email": "faith.njeri@gmail.com",
            "phone": "0711222333",
            "partner_type": "influencer",
            "message": "Home-care reviews for 40k followers.",
        }
        resp = self.client.post("/partners/applications", json=body)
        self.assertEqual(resp.status_code, 201)
        application_id = resp.json()["id"]
        self.assertEqual(resp.json()["status"], "pending")

        self.assertEqual(self.client.post("/partners/applications", json={**body, "email": "not-an-email"}).status_code, 422)
        self.assertEqual(len(self.client.get("/partners/applications", params={"status": "pending"}).json()), 1)

        resp = self.client.patch(f"/partners/applications/{application_id}", json={"status": "approved"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "approved")
        resp = self.client.patch(f"/partners/applications/{application_id}", json={"status": "rejected"})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.patch("/partners/applications/missing", json={"status": "approved"})
        self.assertEqual(resp.status_code, 404)


class TestReviewRoutes(ApiTestCase):
    def test_order_review_link_and_product_reviews(self):
        dish = self.create_product()
        self.stock(dish, "500ml", 3)
        order_id = self.services.orders.place_order(self.customer(), [self.item(dish, "500ml", 1)], "T-20")

        resp = self.client.post(f"/orders/{order_id}/review", json={"product_id": dish.id, "rating": 5})
        self.assertEqual(resp.status_code, 422)

        for status in ("processing", "ready-for-dispatch", "shipped", "delivered"):
            self.services.orders.update_status(order_id, status)
        resp = self.client.post(f"/orders/{order_id}/review", json={"product_id": dish.id, "rating": 5, "comment": "Great"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["user_name"], "Wanjiku Kamau")

        resp = self.client.post(f"/products/{dish.id}/reviews", json={"user_id": "u9", "user_name": "Otieno", "rating": 3})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.post(f"/products/{dish.id}/reviews", json={"user_id": "u9", "user_name": "Otieno", "rating": 9}).status_code, 422)

        self.assertEqual(len(self.client.get(f"/products/{dish.id}/reviews").json()), 2)
        product = self.client.get(f"/products/{dish.id}").json()
        self.assertEqual((product["review_count"], product["rating"]), (2, 4.0))


class TestSalesLogAndAttendanceRoutes(ApiTestCase):
    def test_sales_log_round_trip(self):
        dish = self.create_product()
        body = {
            "salesperson_id": "sp-5",
            "salesperson_name": "Kevin Mutua",
            "lines": [{"product_id": dish.id, "size": "500ml", "qty_issued": 12, "qty_sold": 9, "qty_returned": 3}],
        }
        resp = self.client.post("/sales/logs", json=body)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()[0]["qty_sold"], 9)
        body["lines"][0]["qty_sold"] = 13
        self.assertEqual(self.client.post("/sales/logs", json=body).status_code, 422)
        self.assertEqual(len(self.client.get("/sales/logs", params={"salesperson_id": "sp-5"}).json()), 1)

    def test_check_in_status_and_check_out(self):
        body = {"user_id": "sp-5", "user_name": "Kevin Mutua", "latitude": -1.28, "longitude": 36.82}
        self.assertEqual(self.client.post("/attendance/check-out", json=body).status_code, 422)
        resp = self.client.post("/attendance/check-in", json=body)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.post("/attendance/check-in", json=body).status_code, 422)

        status = self.client.get("/attendance/status/sp-5").json()
        self.assertTrue(status["has_checked_in"])
        self.assertFalse(status["has_checked_out"])
        self.assertEqual([r["user_id"] for r in self.client.get("/attendance/today").json()], ["sp-5"])

        resp = self.client.post("/attendance/check-out", json=body)
        self.assertEqual(resp.status_code, 200)
        self.assertIsNotNone(resp.json()["check_out_time"])
        self.assertEqual(self.client.get("/attendance/status/nobody").json()["has_checked_in"], False)


if __name__ == "__main__":
    unittest.main()
