"""Payment gateway protocol (Paystack-like interface)."""

from typing import Any, Optional, Protocol


class PaymentGateway(Protocol):
    """Abstract interface for starting, polling and verifying payments.

    Every method returns the gateway's JSON envelope as a dict:
    ``{"status": bool, "message": str, "data": {...}}``.
    """

    def initialize_transaction(
        self,
        email: str,
        amount_minor: int,
        metadata: Optional[dict[str, Any]] = None,
        callback_url: Optional[str] = None,
    ) -> dict[str, Any]:
        """Start a hosted checkout; data holds authorization_url, access_code, reference."""
        ...

    def charge_mobile_money(
        self,
        email: str,
        amount_minor: int,
        phone: str,
        provider: str,
        reference: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Start a mobile-money push charge; data.status is usually pending or send_otp."""
        ...

    def check_charge(self, reference: str) -> dict[str, Any]:
        """Current state of a pending charge."""
        ...

    def verify_transaction(self, reference: str) -> dict[str, Any]:
        """Final state of a transaction."""
        ...
