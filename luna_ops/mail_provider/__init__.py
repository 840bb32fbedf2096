"""Mail provider: sender protocol, ZeptoMail and outbox implementations."""

from luna_ops.mail_provider.models import EmailAddress, OutgoingEmail
from luna_ops.mail_provider.outbox_mock import OutboxMailSender
from luna_ops.mail_provider.protocol import MailSender
from luna_ops.mail_provider.zeptomail import ZeptoMailSender

__all__ = [
    "EmailAddress",
    "MailSender",
    "OutboxMailSender",
    "OutgoingEmail",
    "ZeptoMailSender",
]
