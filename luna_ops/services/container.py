"""Explicit construction of every service. No module-level singletons."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from luna_ops import config
from luna_ops.db import Database
from luna_ops.mail_provider import EmailAddress, MailSender, OutboxMailSender, ZeptoMailSender
from luna_ops.payments import PaymentGateway, PaystackClient
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.attendance_service import AttendanceService
from luna_ops.services.catalog_service import CatalogService
from luna_ops.services.checkout_service import CheckoutService
from luna_ops.services.field_sale_service import FieldSaleService
from luna_ops.services.ledger import InventoryLedger, RawMaterialLedger
from luna_ops.services.manufacturing_service import ManufacturingService
from luna_ops.services.material_service import MaterialService
from luna_ops.services.notifier import Notifier
from luna_ops.services.order_service import OrderService
from luna_ops.services.partner_service import PartnerService
from luna_ops.services.purchase_order_service import PurchaseOrderService
from luna_ops.services.reconciliation_service import ReconciliationService
from luna_ops.services.referral_service import ReferralService
from luna_ops.services.review_service import ReviewService
from luna_ops.services.sales_log_service import SalesLogService
from luna_ops.services.staff_mail import StaffMailer
from luna_ops.services.user_service import UserService
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.container")


@dataclass
class Services:
    db: Database
    gateway: PaymentGateway
    mailer: MailSender
    notifier: Notifier
    inventory: InventoryLedger
    raw_materials: RawMaterialLedger
    activity: ActivityService
    catalog: CatalogService
    orders: OrderService
    checkout: CheckoutService
    field_sales: FieldSaleService
    manufacturing: ManufacturingService
    materials: MaterialService
    referrals: ReferralService
    reconciliation: ReconciliationService
    purchase_orders: PurchaseOrderService
    users: UserService
    partners: PartnerService
    reviews: ReviewService
    sales_logs: SalesLogService
    attendance: AttendanceService
    paystack_secret_key: str
    http_client: Optional[httpx.Client] = None

    def close(self) -> None:
        """Stop background workers and release HTTP and DB resources."""
        self.notifier.shutdown(wait=True)
        if self.http_client is not None:
            self.http_client.close()
        self.db.dispose()


def build_mail_sender(provider: str, http_client: Optional[httpx.Client] = None) -> MailSender:
    if provider == "outbox":
        return OutboxMailSender(config.OUTBOX_PATH)
    return ZeptoMailSender(config.ZEPTO_TOKEN, config.ZEPTO_API_URL, http_client=http_client)


def build_services(
    db: Optional[Database] = None,
    gateway: Optional[PaymentGateway] = None,
    mailer: Optional[MailSender] = None,
    notifier: Optional[Notifier] = None,
    paystack_secret_key: Optional[str] = None,
    public_base_url: Optional[str] = None,
    sleep: Callable[[float], None] = time.sleep,
    poll_interval_seconds: Optional[float] = None,
    poll_max_attempts: Optional[int] = None,
) -> Services:
    """Wire the service graph. Anything not passed in is built from luna_ops.config."""
    secret = config.PAYSTACK_SECRET_KEY if paystack_secret_key is None else paystack_secret_key
    base_url = (public_base_url or config.PUBLIC_BASE_URL).rstrip("/")

    http_client = None
    if gateway is None or mailer is None:
        http_client = httpx.Client(
            timeout=httpx.Timeout(config.PAYSTACK_TIMEOUT_SECONDS),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )
    db = db or Database(config.DATABASE_URL, config.TRANSACTION_MAX_ATTEMPTS)
    gateway = gateway or PaystackClient(secret, config.PAYSTACK_BASE_URL, http_client=http_client)
    mailer = mailer or build_mail_sender(config.MAIL_PROVIDER, http_client=http_client)
    notifier = notifier or Notifier(config.NOTIFIER_WORKER_COUNT)

    activity = ActivityService(db)
    staff_sender = EmailAddress(address=config.MAIL_FROM_ADDRESS, name=config.MAIL_FROM_NAME)
    staff_mail = StaffMailer(db, mailer, staff_sender)
    orders = OrderService(
        db,
        mailer,
        notifier,
        activity,
        customer_sender=EmailAddress(address=config.SALES_FROM_ADDRESS, name=config.SALES_FROM_NAME),
        staff_sender=staff_sender,
        public_base_url=base_url,
    )
    services = Services(
        db=db,
        gateway=gateway,
        mailer=mailer,
        notifier=notifier,
        inventory=InventoryLedger(db),
        raw_materials=RawMaterialLedger(db),
        activity=activity,
        catalog=CatalogService(db),
        orders=orders,
        checkout=CheckoutService(gateway, orders, callback_url=f"{base_url}/products/verify-payment"),
        field_sales=FieldSaleService(
            db,
            gateway,
            orders,
            activity,
            email_domain=config.FIELD_SALE_EMAIL_DOMAIN,
            poll_interval_seconds=(
                config.PAYMENT_POLL_INTERVAL_SECONDS if poll_interval_seconds is None else poll_interval_seconds
            ),
            poll_max_attempts=poll_max_attempts or config.PAYMENT_POLL_MAX_ATTEMPTS,
            sleep=sleep,
        ),
        manufacturing=ManufacturingService(db, activity),
        materials=MaterialService(db, activity),
        referrals=ReferralService(db, base_url, code_length=config.REFERRAL_CODE_LENGTH),
        reconciliation=ReconciliationService(db, activity),
        purchase_orders=PurchaseOrderService(db, activity),
        users=UserService(db),
        partners=PartnerService(db, staff_mail, notifier, activity),
        reviews=ReviewService(db),
        sales_logs=SalesLogService(db, staff_mail, notifier, activity),
        attendance=AttendanceService(db, activity, utc_offset_hours=config.ATTENDANCE_UTC_OFFSET_HOURS),
        paystack_secret_key=secret,
        http_client=http_client,
    )
    logger.info(
        "services.built",
        database=db.engine.url.render_as_string(hide_password=True),
        mail_provider=type(mailer).__name__,
        gateway=type(gateway).__name__,
    )
    return services
