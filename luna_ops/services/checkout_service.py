"""Online checkout: start a hosted Paystack payment, then verify it and place the order."""

from typing import Any, Optional

from luna_ops.exceptions import ExternalServiceError, PaymentNotConfirmed
from luna_ops.models.cart import CartItem, CustomerInfo
from luna_ops.payments.paystack import to_minor_units
from luna_ops.payments.protocol import PaymentGateway
from luna_ops.services.order_service import OrderService
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.checkout")


class CheckoutService:
    def __init__(self, gateway: PaymentGateway, orders: OrderService, callback_url: str):
        self._gateway = gateway
        self._orders = orders
        self._callback_url = callback_url

    def initialize_checkout(
        self,
        items: list[CartItem],
        customer: CustomerInfo,
        user_id: Optional[str] = None,
        client_total: Optional[float] = None,
    ) -> dict[str, str]:
        """Price the cart on the server and open a hosted payment for that amount."""
        totals = self._orders.quote(items, customer.delivery_method)
        if client_total is not None and abs(client_total - totals.total_amount) > 0.005:
            logger.warning("checkout.init.client_total_ignored", client_total=client_total, server_total=totals.total_amount)
        metadata: dict[str, Any] = {
            "customer_name": customer.name,
            "customer_phone": customer.phone,
            "item_count": sum(i.quantity for i in items),
        }
        if user_id:
            metadata["user_id"] = user_id
        response = self._gateway.initialize_transaction(
            str(customer.email),
            to_minor_units(totals.total_amount),
            metadata=metadata,
            callback_url=self._callback_url,
        )
        data = response.get("data") or {}
        if not response.get("status") or not data.get("authorization_url"):
            raise ExternalServiceError(
                "paystack",
                response.get("message") or "Could not initialize payment.",
                str(response)[:500],
            )
        logger.info("checkout.init.ok", reference=data.get("reference"), total_amount=totals.total_amount)
        return {
            "authorization_url": data["authorization_url"],
            "access_code": data.get("access_code", ""),
            "reference": data.get("reference", ""),
        }

    def verify_and_place_order(
        self,
        reference: str,
        items: list[CartItem],
        customer: CustomerInfo,
        user_id: Optional[str] = None,
        client_total: Optional[float] = None,
    ) -> str:
        """Re-verify ``reference`` with the gateway and place the order. Returns the order id."""
        response = self._gateway.verify_transaction(reference)
        data = response.get("data") or {}
        status = data.get("status")
        if response.get("status") is not True or status != "success":
            logger.warning("checkout.verify.not_confirmed", reference=reference, status=status)
            raise PaymentNotConfirmed(reference, status, "Payment verification failed.")

        paid = data.get("amount")
        if paid is not None:
            try:
                paid_minor = int(paid)
            except (TypeError, ValueError) as e:
                logger.error("checkout.verify.bad_amount", reference=reference, amount=paid)
                raise ExternalServiceError(
                    "paystack", "Payment verification returned an invalid amount.", f"amount={paid!r}"
                ) from e
            expected = to_minor_units(self._orders.quote(items, customer.delivery_method).total_amount)
            if paid_minor < expected:
                logger.warning("checkout.verify.underpaid", reference=reference, paid=paid, expected=expected)
                raise PaymentNotConfirmed(reference, status, "Paid amount does not cover the order total.")

        logger.info("checkout.verify.confirmed", reference=reference)
        return self._orders.place_order(customer, items, reference, user_id=user_id, client_total=client_total)
