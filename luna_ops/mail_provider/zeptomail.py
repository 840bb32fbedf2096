"""ZeptoMail transactional e-mail sender over httpx."""

from typing import Any, Optional

import httpx

from luna_ops.exceptions import ConfigurationError, ExternalServiceError
from luna_ops.mail_provider.models import EmailAddress
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.mail_provider.zeptomail")

SERVICE = "zeptomail"


def _address(addr: EmailAddress) -> dict[str, Any]:
    out: dict[str, Any] = {"address": addr.address}
    if addr.name:
        out["name"] = addr.name
    return out


class ZeptoMailSender:
    """Sends through the ZeptoMail REST API. The token is sent verbatim as the Authorization header."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.zeptomail.com/v1.1/email",
        http_client: Optional[httpx.Client] = None,
    ):
        self._token = token
        self._api_url = api_url
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(30.0))

    def send(self, from_: EmailAddress, to: list[EmailAddress], subject: str, html_body: str) -> None:
        if not self._token:
            raise ConfigurationError("ZEPTO_TOKEN", "ZeptoMail token is not configured.")
        payload = {
            "from": _address(from_),
            "to": [{"email_address": _address(r)} for r in to],
            "subject": subject,
            "htmlbody": html_body,
        }
        headers = {
            "Authorization": self._token,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        try:
            response = self._client.post(self._api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("mail.zeptomail.transport_error", error=str(e))
            raise ExternalServiceError(SERVICE, "Could not reach the e-mail provider.", str(e)) from e
        if response.is_error:
            logger.error(
                "mail.zeptomail.failed",
                status_code=response.status_code,
                body=response.text[:500],
                subject=subject,
            )
            raise ExternalServiceError(
                SERVICE,
                "E-mail could not be sent.",
                f"HTTP {response.status_code}: {response.text[:500]}",
            )
        logger.info("mail.zeptomail.sent", to=[r.address for r in to], subject=subject)
