"""Payment gateway package: Paystack client, phone normalization, charge polling, webhook signatures."""

from luna_ops.payments.paystack import PaystackClient, to_minor_units
from luna_ops.payments.phone import normalize_phone
from luna_ops.payments.polling import await_charge_success
from luna_ops.payments.protocol import PaymentGateway
from luna_ops.payments.signature import compute_signature, verify_signature

__all__ = [
    "PaymentGateway",
    "PaystackClient",
    "await_charge_success",
    "compute_signature",
    "normalize_phone",
    "to_minor_units",
    "verify_signature",
]
