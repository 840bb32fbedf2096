"""Order placement transaction, order queries and the status state machine."""

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.models import Order, OrderItem
from luna_ops.db.repositories import order_repo, product_repo, user_repo
from luna_ops.db.repositories.inventory_repo import inventory_key
from luna_ops.exceptions import (
    InvalidStatusTransition,
    LunaOpsError,
    OrderCreationError,
    OrderNotFound,
    ProductNotFound,
    TransactionConflict,
    ValidationError,
)
from luna_ops.mail_provider import EmailAddress, MailSender
from luna_ops.mail_provider import templates
from luna_ops.models.cart import CartItem, CustomerInfo, DeliveryMethod
from luna_ops.models.orders import OrderStatus
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.ledger import InventoryLedger
from luna_ops.services.notifier import Notifier
from luna_ops.utils.logger import get_logger, log_context
from luna_ops.utils.tracing import get_tracer

logger = get_logger("luna_ops.services.orders")

# Allowed moves: main path plus cancellation before dispatch and the return branch after shipping
STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING_PAYMENT.value: frozenset({OrderStatus.PAID.value, OrderStatus.CANCELLED.value}),
    OrderStatus.PAID.value: frozenset({OrderStatus.PROCESSING.value, OrderStatus.CANCELLED.value}),
    OrderStatus.PROCESSING.value: frozenset({OrderStatus.READY_FOR_DISPATCH.value, OrderStatus.CANCELLED.value}),
    OrderStatus.READY_FOR_DISPATCH.value: frozenset({OrderStatus.SHIPPED.value, OrderStatus.CANCELLED.value}),
    OrderStatus.SHIPPED.value: frozenset({OrderStatus.DELIVERED.value, OrderStatus.RETURN_PENDING.value}),
    OrderStatus.RETURN_PENDING.value: frozenset({OrderStatus.RETURNED.value}),
    OrderStatus.DELIVERED.value: frozenset(),
    OrderStatus.CANCELLED.value: frozenset(),
    OrderStatus.RETURNED.value: frozenset(),
}
STATUS_ALIASES = {"return-returned": OrderStatus.RETURNED.value}

NOTIFY_ROLES = ("admin", "sales")


@dataclass
class PricedLine:
    product_id: str
    product_name: str
    size: str
    quantity: int
    unit_price: float
    image_url: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.product_name} ({self.size})"


@dataclass
class OrderTotals:
    subtotal: float = 0.0
    delivery_fee: float = 0.0
    platform_fee: float = 0.0
    lines: list[PricedLine] = field(default_factory=list)

    @property
    def total_amount(self) -> float:
        return round(self.subtotal + self.delivery_fee + self.platform_fee, 2)


def compute_totals(session: Session, items: list[CartItem], delivery_method: DeliveryMethod) -> OrderTotals:
    """Price the cart from current catalogue data.

    Unit prices come from ProductSize. Delivery and platform fees are charged
    once per distinct product; delivery is skipped for pickup.
    """
    if not items:
        raise ValidationError("Order must contain at least one item")
    products = product_repo.get_products(session, sorted({i.product_id for i in items}))
    totals = OrderTotals()
    fee_charged: set[str] = set()
    for item in items:
        product = products.get(item.product_id)
        if product is None:
            raise ProductNotFound(item.product_id)
        size = product.size_for(item.size)
        if size is None:
            raise ProductNotFound(f"{item.product_id} ({item.size})")
        totals.lines.append(
            PricedLine(
                product_id=product.id,
                product_name=product.name,
                size=size.size,
                quantity=item.quantity,
                unit_price=size.price,
                image_url=item.image_url or product.image_url,
            )
        )
        totals.subtotal += size.price * item.quantity
        if product.id not in fee_charged:
            fee_charged.add(product.id)
            totals.platform_fee += product.platform_fee
            if delivery_method != DeliveryMethod.PICKUP:
                totals.delivery_fee += product.delivery_fee
    totals.subtotal = round(totals.subtotal, 2)
    totals.delivery_fee = round(totals.delivery_fee, 2)
    totals.platform_fee = round(totals.platform_fee, 2)
    return totals


class OrderService:
    """Owns the order placement transaction and order lifecycle."""

    def __init__(
        self,
        db: Database,
        mailer: MailSender,
        notifier: Notifier,
        activity: ActivityService,
        customer_sender: EmailAddress,
        staff_sender: EmailAddress,
        public_base_url: str = "http://localhost:8000",
    ):
        self._db = db
        self._mailer = mailer
        self._notifier = notifier
        self._activity = activity
        self._customer_sender = customer_sender
        self._staff_sender = staff_sender
        self._public_base_url = public_base_url.rstrip("/")

    def quote(self, items: list[CartItem], delivery_method: DeliveryMethod) -> OrderTotals:
        """Server-side price of a cart without placing it."""
        with self._db.session() as session:
            return compute_totals(session, items, delivery_method)

    def place_order(
        self,
        customer: CustomerInfo,
        items: list[CartItem],
        payment_reference: Optional[str],
        user_id: Optional[str] = None,
        client_total: Optional[float] = None,
    ) -> str:
        """Create a paid order and decrement stock for every line, all or nothing.

        Returns the order id. A reference that already has an order returns that
        order's id without touching stock again. Raises InsufficientStock naming
        the first line that cannot be filled, ProductNotFound for an unknown
        product or size, and OrderCreationError for anything else.
        """
        tracer = get_tracer()

        def _place(session: Session) -> tuple[Order, bool, OrderTotals]:
            if payment_reference:
                existing = order_repo.get_by_reference(session, payment_reference)
                if existing is not None:
                    return existing, False, OrderTotals()
            totals = compute_totals(session, items, customer.delivery_method)
            order = Order(
                user_id=user_id,
                customer_name=customer.name,
                customer_email=str(customer.email),
                customer_phone=customer.phone,
                shipping_address=customer.shipping_address,
                county=customer.county,
                delivery_method=customer.delivery_method.value,
                delivery_notes=customer.delivery_notes,
                subtotal=totals.subtotal,
                delivery_fee=totals.delivery_fee,
                platform_fee=totals.platform_fee,
                total_amount=totals.total_amount,
                status=OrderStatus.PAID.value,
                paystack_reference=payment_reference,
                items=[
                    OrderItem(
                        position=i,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        size=line.size,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        image_url=line.image_url,
                    )
                    for i, line in enumerate(totals.lines)
                ],
            )
            session.add(order)
            for line in totals.lines:
                InventoryLedger.decrement(
                    session, inventory_key(line.product_id, line.size), line.quantity, line.label
                )
            session.flush()
            return order, True, totals

        with log_context(payment_reference=payment_reference), tracer.start_as_current_span("order.place") as span:
            span.set_attribute("order.line_count", len(items))
            try:
                order, created, totals = self._db.run_transaction(_place, name="order.place")
            except TransactionConflict as e:
                logger.error("order.place.conflict", reference=payment_reference, attempts=e.attempts)
                raise OrderCreationError(str(e), cause=e) from e
            except LunaOpsError as e:
                logger.warning("order.place.rejected", reference=payment_reference, error=str(e))
                raise
            except SQLAlchemyError as e:
                logger.error("order.place.failed", reference=payment_reference, error=str(e))
                raise OrderCreationError(str(e)) from e
            span.set_attribute("order.id", order.id)

        if not created:
            logger.info("order.place.duplicate_reference", order_id=order.id, reference=payment_reference)
            return order.id

        if client_total is not None and abs(client_total - totals.total_amount) > 0.005:
            logger.warning(
                "order.place.client_total_ignored",
                order_id=order.id,
                client_total=client_total,
                server_total=totals.total_amount,
            )
        logger.info(
            "order.place.committed",
            order_id=order.id,
            reference=payment_reference,
            total_amount=order.total_amount,
            lines=len(order.items),
        )
        self._notifier.submit("order.notify_placed", self._send_order_notifications, order.id)
        return order.id

    def get_order(self, order_id: str) -> Order:
        with self._db.session() as session:
            order = order_repo.get_order(session, order_id)
            if order is None:
                raise OrderNotFound(order_id)
            return order

    def find_by_reference(self, reference: str) -> Optional[Order]:
        with self._db.session() as session:
            return order_repo.get_by_reference(session, reference)

    def list_orders(self, status: Optional[str] = None, user_id: Optional[str] = None, limit: int = 100) -> list[Order]:
        with self._db.session() as session:
            return order_repo.list_orders(session, status=status, user_id=user_id, limit=limit)

    def update_status(
        self,
        order_id: str,
        new_status: str,
        user_id: str = "system",
        user_name: str = "System",
    ) -> Order:
        """Move an order along the state machine. Raises InvalidStatusTransition for illegal moves."""
        requested = STATUS_ALIASES.get(new_status, new_status)
        if requested not in STATUS_TRANSITIONS:
            raise ValidationError(f"Unknown order status {new_status!r}")

        with self._db.session() as session:
            order = order_repo.get_order(session, order_id)
            if order is None:
                raise OrderNotFound(order_id)
            current = order.status
            if requested not in STATUS_TRANSITIONS.get(current, frozenset()):
                raise InvalidStatusTransition(current, requested)
            order.status = requested
            session.flush()

        logger.info("order.status.updated", order_id=order_id, previous=current, status=requested, user_id=user_id)
        self._activity.log_activity(
            f"Updated order #{order_id[:8].upper()} status from {current} to {requested}",
            user_id,
            user_name,
        )
        if requested == OrderStatus.DELIVERED.value:
            self._notifier.submit("order.notify_review", self._send_review_request, order_id)
        return order

    def _send_order_notifications(self, order_id: str) -> None:
        order = self.get_order(order_id)
        subject, html = templates.order_confirmation(order)
        try:
            self._mailer.send(
                self._customer_sender,
                [EmailAddress(address=order.customer_email, name=order.customer_name)],
                subject,
                html,
            )
        except Exception as e:
            logger.error("order.notify.customer_failed", order_id=order_id, error=str(e))

        with self._db.session() as session:
            staff = [EmailAddress(address=u.email, name=u.display_name) for u in user_repo.list_by_roles(session, NOTIFY_ROLES)]
        if not staff:
            logger.info("order.notify.no_staff_recipients", order_id=order_id)
            return
        subject, html = templates.new_order_notice(order)
        try:
            self._mailer.send(self._staff_sender, staff, subject, html)
        except Exception as e:
            logger.error("order.notify.staff_failed", order_id=order_id, error=str(e))

    def _send_review_request(self, order_id: str) -> None:
        order = self.get_order(order_id)
        subject, html = templates.review_request(order, f"{self._public_base_url}/orders/{order.id}/review")
        self._mailer.send(
            self._customer_sender,
            [EmailAddress(address=order.customer_email, name=order.customer_name)],
            subject,
            html,
        )
        logger.info("order.notify.review_sent", order_id=order_id)
