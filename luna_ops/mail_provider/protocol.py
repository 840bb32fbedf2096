"""Mail sender protocol."""

from typing import Protocol

from luna_ops.mail_provider.models import EmailAddress


class MailSender(Protocol):
    """Abstract interface for sending one transactional e-mail."""

    def send(self, from_: EmailAddress, to: list[EmailAddress], subject: str, html_body: str) -> None:
        """Send the message or raise ExternalServiceError / ConfigurationError."""
        ...
