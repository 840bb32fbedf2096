"""Partner programme: applications, admin review and onboarding of approved partners."""

from typing import Optional

from luna_ops.db import Database
from luna_ops.db.models import APPLICATION_STATUSES, PartnerApplication
from luna_ops.db.repositories import partner_repo, user_repo
from luna_ops.exceptions import ApplicationNotFound, ValidationError
from luna_ops.mail_provider import templates
from luna_ops.models.partners import PartnerApplicationCreate
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.notifier import Notifier
from luna_ops.services.staff_mail import ADMIN_ROLES, StaffMailer
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.partners")

PARTNER_TYPE_TO_ROLE = {
    "influencer": "influencer",
    "delivery-partner": "delivery-partner",
    "pickup-location": "pickup-location-staff",
}


class PartnerService:
    def __init__(self, db: Database, staff_mail: StaffMailer, notifier: Notifier, activity: ActivityService):
        self._db = db
        self._staff_mail = staff_mail
        self._notifier = notifier
        self._activity = activity

    def submit_application(self, data: PartnerApplicationCreate) -> PartnerApplication:
        """Store a pending application and e-mail the admins in the background."""
        with self._db.session() as session:
            application = partner_repo.add_application(
                session,
                name=data.name,
                email=str(data.email).lower(),
                phone=data.phone,
                partner_type=data.partner_type,
                message=data.message,
                status="pending",
            )
        logger.info("partners.application.submitted", application_id=application.id, partner_type=data.partner_type)
        self._notifier.submit("partners.notify_admins", self._notify_admins, application.id)
        return application

    def get_application(self, application_id: str) -> PartnerApplication:
        with self._db.session() as session:
            application = partner_repo.get_application(session, application_id)
            if application is None:
                raise ApplicationNotFound(application_id)
            return application

    def list_applications(self, status: Optional[str] = None) -> list[PartnerApplication]:
        with self._db.session() as session:
            return partner_repo.list_applications(session, status=status)

    def update_status(
        self,
        application_id: str,
        status: str,
        user_id: str = "system",
        user_name: str = "System",
    ) -> PartnerApplication:
        """Approve or reject a pending application.

        Approval gives the applicant's e-mail the partner role for their type,
        creating the user when needed, in the same transaction as the status
        change. The welcome e-mail goes out after commit.
        """
        if status not in APPLICATION_STATUSES or status == "pending":
            raise ValidationError(f"Unknown application status {status!r}")

        with self._db.session() as session:
            application = partner_repo.get_application(session, application_id)
            if application is None:
                raise ApplicationNotFound(application_id)
            if application.status != "pending":
                raise ValidationError(f"Application was already {application.status}")
            application.status = status
            if status == "approved":
                role = PARTNER_TYPE_TO_ROLE[application.partner_type]
                existing = user_repo.get_by_email(session, application.email)
                roles = (existing.role_list if existing else []) + [role]
                name = existing.display_name if existing else application.name
                user_repo.upsert_user(session, application.email, name, roles)
            session.flush()

        logger.info("partners.application.updated", application_id=application_id, status=status, user_id=user_id)
        self._activity.log_activity(
            f"Marked partner application from {application.name} as {status}",
            user_id,
            user_name,
        )
        if status == "approved":
            self._notifier.submit("partners.welcome", self._send_welcome, application_id)
        return application

    def _notify_admins(self, application_id: str) -> None:
        application = self.get_application(application_id)
        subject, html = templates.partner_application_notice(application)
        self._staff_mail.send_to_roles(ADMIN_ROLES, subject, html)

    def _send_welcome(self, application_id: str) -> None:
        application = self.get_application(application_id)
        subject, html = templates.partner_welcome(application)
        self._staff_mail.send_to(application.email, application.name, subject, html)
        logger.info("partners.welcome.sent", application_id=application_id)
