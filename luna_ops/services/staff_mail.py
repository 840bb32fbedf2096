"""E-mail to every user holding a role (admins, sales)."""

from typing import Iterable

from luna_ops.db import Database
from luna_ops.db.repositories import user_repo
from luna_ops.mail_provider import EmailAddress, MailSender
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.staff_mail")

ADMIN_ROLES = ("admin",)


class StaffMailer:
    def __init__(self, db: Database, mailer: MailSender, sender: EmailAddress):
        self._db = db
        self._mailer = mailer
        self._sender = sender

    def send_to_roles(self, roles: Iterable[str], subject: str, html: str) -> int:
        """Send one message addressed to all holders of ``roles``. Returns the recipient count."""
        roles = tuple(roles)
        with self._db.session() as session:
            recipients = [
                EmailAddress(address=u.email, name=u.display_name) for u in user_repo.list_by_roles(session, roles)
            ]
        if not recipients:
            logger.info("staff_mail.no_recipients", roles=roles, subject=subject)
            return 0
        self._mailer.send(self._sender, recipients, subject, html)
        logger.info("staff_mail.sent", roles=roles, subject=subject, recipients=len(recipients))
        return len(recipients)

    def send_to(self, address: str, name: str, subject: str, html: str) -> None:
        self._mailer.send(self._sender, [EmailAddress(address=address, name=name)], subject, html)
