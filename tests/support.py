"""Shared test helpers: temp SQLite database, service container, fake gateway and mailer."""

import os
import sys
import tempfile
import threading
import unittest
from pathlib import Path

os.environ.setdefault("LOG_LEVEL", "WARNING")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from luna_ops.db import Database
from luna_ops.db.models import Product
from luna_ops.exceptions import ExternalServiceError
from luna_ops.models.cart import CartItem, CustomerInfo, DeliveryMethod
from luna_ops.models.catalog import ProductCreate, ProductSizeIn
from luna_ops.services.container import Services, build_services
from luna_ops.services.notifier import Notifier

PAYSTACK_SECRET = "sk_test_3f9a1c"


class FakeGateway:
    """In-memory PaymentGateway. ``poll_statuses`` are returned by check_charge in order."""

    def __init__(self, charge_status="pending", poll_statuses=None, verify_response=None, init_response=None):
        self.charge_status = charge_status
        self.poll_statuses = list(poll_statuses or [])
        self.verify_response = verify_response
        self.init_response = init_response
        self.calls = []

    def initialize_transaction(self, email, amount_minor, metadata=None, callback_url=None):
        self.calls.append(("initialize", email, amount_minor, callback_url))
        if self.init_response is not None:
            return self.init_response
        return {
            "status": True,
            "message": "Authorization URL created",
            "data": {
                "authorization_url": "https://checkout.paystack.com/0peioxfhpn",
                "access_code": "0peioxfhpn",
                "reference": "7PVGX8MEk85tgeEpVDtD",
            },
        }

    def charge_mobile_money(self, email, amount_minor, phone, provider, reference, metadata=None):
        self.calls.append(("charge", email, amount_minor, phone, provider, reference))
        return {
            "status": True,
            "message": "Charge attempted",
            "data": {"status": self.charge_status, "reference": reference},
        }

    def check_charge(self, reference):
        self.calls.append(("check", reference))
        status = self.poll_statuses.pop(0) if self.poll_statuses else "pending"
        return {"status": True, "data": {"status": status, "reference": reference}}

    def verify_transaction(self, reference):
        self.calls.append(("verify", reference))
        if self.verify_response is not None:
            return self.verify_response
        return {"status": True, "message": "Verification successful", "data": {"status": "success", "reference": reference}}

    def count(self, kind):
        return sum(1 for c in self.calls if c[0] == kind)


class RecordingMailer:
    """MailSender that records messages; with ``fail=True`` every send raises."""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self._lock = threading.Lock()

    def send(self, from_, to, subject, html_body):
        if self.fail:
            raise ExternalServiceError("zeptomail", "E-mail could not be sent.", "HTTP 500")
        with self._lock:
            self.sent.append({"from": from_.address, "to": [a.address for a in to], "subject": subject, "html": html_body})

    def recipients(self):
        return [addr for m in self.sent for addr in m["to"]]


class ServiceTestCase(unittest.TestCase):
    """Fresh SQLite file database and service container per test."""

    max_attempts = 10

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(self._tmpdir.name) / "luna_ops_test.sqlite"
        self.db = Database(f"sqlite:///{db_path}", max_attempts=self.max_attempts)
        self.db.init()
        self.gateway = FakeGateway()
        self.mailer = RecordingMailer()
        self.sleeps = []
        self.services: Services = build_services(
            db=self.db,
            gateway=self.gateway,
            mailer=self.mailer,
            notifier=Notifier(max_workers=1),
            paystack_secret_key=PAYSTACK_SECRET,
            public_base_url="https://shop.luna.co.ke",
            sleep=self.sleeps.append,
            poll_interval_seconds=6,
            poll_max_attempts=10,
        )

    def tearDown(self):
        self.services.close()
        self._tmpdir.cleanup()

    def create_product(
        self,
        name="Dish Wash",
        sizes=(("500ml", 250.0), ("1 L", 450.0)),
        delivery_fee=200.0,
        platform_fee=20.0,
    ) -> Product:
        return self.services.catalog.create_product(
            ProductCreate(
                name=name,
                category="Home Care",
                delivery_fee=delivery_fee,
                platform_fee=platform_fee,
                sizes=[ProductSizeIn(size=s, price=p) for s, p in sizes],
            )
        )

    def stock(self, product: Product, size: str, quantity: int) -> None:
        self.services.inventory.set_stock(product.id, size, quantity)

    @staticmethod
    def customer(delivery_method=DeliveryMethod.DOOR_TO_DOOR, **overrides) -> CustomerInfo:
        fields = {
            "name": "Wanjiku Kamau",
            "email": "wanjiku.kamau@gmail.com",
            "phone": "0712345678",
            "shipping_address": "Moi Avenue 12, Nairobi",
            "county": "Nairobi",
            "delivery_method": delivery_method,
        }
        fields.update(overrides)
        return CustomerInfo(**fields)

    @staticmethod
    def item(product: Product, size: str, quantity: int, price=None) -> CartItem:
        return CartItem(product_id=product.id, size=size, quantity=quantity, price=price)
