"""Field (point-of-sale) sales paid by M-Pesa push charge."""

import secrets
import time
from typing import Callable, Optional

from luna_ops.db import Database
from luna_ops.db.models import FieldSaleLog
from luna_ops.db.repositories import sales_repo
from luna_ops.exceptions import PaymentNotConfirmed
from luna_ops.models.cart import CustomerInfo, DeliveryMethod
from luna_ops.models.sales import FieldSaleRequest
from luna_ops.payments.paystack import to_minor_units
from luna_ops.payments.phone import normalize_phone
from luna_ops.payments.polling import await_charge_success, charge_status
from luna_ops.payments.protocol import PaymentGateway
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.order_service import OrderService
from luna_ops.utils.logger import get_logger, log_context

logger = get_logger("luna_ops.services.field_sales")

FIELD_SALE_ADDRESS = "Field sale"


class FieldSaleService:
    def __init__(
        self,
        db: Database,
        gateway: PaymentGateway,
        orders: OrderService,
        activity: ActivityService,
        email_domain: str = "luna.co.ke",
        poll_interval_seconds: float = 6.0,
        poll_max_attempts: int = 10,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self._db = db
        self._gateway = gateway
        self._orders = orders
        self._activity = activity
        self._email_domain = email_domain
        self._poll_interval = poll_interval_seconds
        self._poll_max_attempts = poll_max_attempts
        self._sleep = sleep
        self._clock = clock

    def process_field_sale(self, request: FieldSaleRequest) -> dict:
        """Charge the customer's phone, wait for confirmation, then place the order.

        Blocks for up to poll_interval * poll_max_attempts seconds. Raises
        PaymentNotConfirmed when the charge fails or never settles; no order is
        created in that case.
        """
        phone = normalize_phone(request.customer_phone)
        ts = int(self._clock() * 1000)
        customer = CustomerInfo(
            name=request.customer_name,
            email=f"pos-customer-{ts}@{self._email_domain}",
            phone=phone,
            shipping_address=FIELD_SALE_ADDRESS,
            delivery_method=DeliveryMethod.PICKUP,
        )
        totals = self._orders.quote(request.items, DeliveryMethod.PICKUP)
        reference = f"fs-{ts}-{secrets.token_hex(3)}"

        with log_context(field_sale_reference=reference, salesperson_id=request.salesperson_id):
            return self._charge_and_place(request, customer, phone, totals.total_amount, reference)

    def _charge_and_place(
        self, request: FieldSaleRequest, customer: CustomerInfo, phone: str, total: float, reference: str
    ) -> dict:
        logger.info(
            "field_sale.charge.start",
            reference=reference,
            total_amount=total,
        )
        response = self._gateway.charge_mobile_money(
            str(customer.email),
            to_minor_units(total),
            phone,
            request.provider,
            reference,
            metadata={"salesperson_id": request.salesperson_id, "customer_name": request.customer_name},
        )
        if not response.get("status"):
            raise PaymentNotConfirmed(reference, charge_status(response), response.get("message"))
        reference = (response.get("data") or {}).get("reference") or reference

        await_charge_success(
            self._gateway,
            reference,
            initial_status=charge_status(response),
            interval_seconds=self._poll_interval,
            max_attempts=self._poll_max_attempts,
            sleep=self._sleep,
        )

        order_id = self._orders.place_order(customer, request.items, reference, user_id=request.salesperson_id)
        self._record_sale(request, order_id, phone, total, reference)
        self._activity.log_activity(
            f"Recorded field sale of KES {total:,.2f} to {request.customer_name}",
            request.salesperson_id,
            request.salesperson_name,
        )
        return {"order_id": order_id, "reference": reference, "total_amount": total}

    def _record_sale(self, request: FieldSaleRequest, order_id: str, phone: str, total: float, reference: str) -> None:
        try:
            with self._db.session() as session:
                sales_repo.add_field_sale_log(
                    session,
                    order_id=order_id,
                    salesperson_id=request.salesperson_id,
                    salesperson_name=request.salesperson_name,
                    customer_name=request.customer_name,
                    customer_phone=phone,
                    total_amount=total,
                    payment_reference=reference,
                    latitude=request.latitude,
                    longitude=request.longitude,
                )
        except Exception as e:
            logger.error("field_sale.log.failed", order_id=order_id, error=str(e))

    def list_field_sales(self, salesperson_id: Optional[str] = None, limit: int = 100) -> list[FieldSaleLog]:
        with self._db.session() as session:
            return sales_repo.list_field_sale_logs(session, salesperson_id=salesperson_id, limit=limit)
