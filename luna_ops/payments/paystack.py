"""Paystack REST client over httpx."""

from typing import Any, Optional

import httpx

from luna_ops.exceptions import ConfigurationError, ExternalServiceError
from luna_ops.utils.logger import get_logger
from luna_ops.utils.tracing import get_tracer

logger = get_logger("luna_ops.payments.paystack")

SERVICE = "paystack"


class PaystackClient:
    """Paystack API client. Satisfies PaymentGateway.

    The secret key is checked on every call so a missing key is reported as
    ConfigurationError before any HTTP request goes out.
    """

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.paystack.co",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(timeout))

    def _headers(self) -> dict[str, str]:
        if not self._secret_key:
            raise ConfigurationError("PAYSTACK_SECRET_KEY", "Paystack secret key is not configured.")
        return {
            "Authorization": f"Bearer {self._secret_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        headers = self._headers()
        url = f"{self._base_url}{path}"
        with get_tracer().start_as_current_span(f"paystack {method} {path.split('/')[1]}") as span:
            span.set_attribute("http.method", method)
            try:
                response = self._client.request(method, url, headers=headers, json=json)
            except httpx.HTTPError as e:
                logger.error("paystack.request.transport_error", method=method, path=path, error=str(e))
                raise ExternalServiceError(SERVICE, "Could not reach the payment provider.", str(e)) from e
            span.set_attribute("http.status_code", response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error or not isinstance(body, dict):
            message = body.get("message") if isinstance(body, dict) else None
            logger.error(
                "paystack.request.failed",
                method=method,
                path=path,
                status_code=response.status_code,
                provider_message=message,
                body=response.text[:500],
            )
            raise ExternalServiceError(
                SERVICE,
                message or "Payment provider returned an error.",
                f"HTTP {response.status_code}: {response.text[:500]}",
            )
        logger.debug("paystack.request.ok", method=method, path=path, status_code=response.status_code)
        return body

    def initialize_transaction(
        self,
        email: str,
        amount_minor: int,
        metadata: Optional[dict[str, Any]] = None,
        callback_url: Optional[str] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"email": email, "amount": amount_minor}
        if metadata:
            payload["metadata"] = metadata
        if callback_url:
            payload["callback_url"] = callback_url
        return self._request("POST", "/transaction/initialize", json=payload)

    def charge_mobile_money(
        self,
        email: str,
        amount_minor: int,
        phone: str,
        provider: str,
        reference: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "email": email,
            "amount": amount_minor,
            "reference": reference,
            "mobile_money": {"phone": phone, "provider": provider},
        }
        if metadata:
            payload["metadata"] = metadata
        return self._request("POST", "/charge", json=payload)

    def check_charge(self, reference: str) -> dict[str, Any]:
        return self._request("GET", f"/charge/{reference}")

    def verify_transaction(self, reference: str) -> dict[str, Any]:
        return self._request("GET", f"/transaction/verify/{reference}")

    def close(self) -> None:
        self._client.close()


def to_minor_units(amount: float) -> int:
    """Major currency units to the gateway's minor units (KES 1 = 100)."""
    return int(round(amount * 100))
