"""Marketer referral short links with click tracking."""

import secrets
import string

from luna_ops.db import Database
from luna_ops.db.models import ReferralLink
from luna_ops.db.repositories import referral_repo
from luna_ops.exceptions import ReferralNotFound
from luna_ops.models.referrals import ReferralCreate
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.referrals")

CODE_ALPHABET = string.digits + string.ascii_lowercase
_MAX_CODE_ATTEMPTS = 5


def generate_code(length: int = 7) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class ReferralService:
    def __init__(self, db: Database, public_base_url: str, code_length: int = 7):
        self._db = db
        self._public_base_url = public_base_url.rstrip("/")
        self._code_length = code_length

    def create_referral_link(self, data: ReferralCreate) -> ReferralLink:
        with self._db.session() as session:
            for _ in range(_MAX_CODE_ATTEMPTS):
                code = generate_code(self._code_length)
                if referral_repo.get_link(session, code) is None:
                    break
            else:
                raise RuntimeError("Could not generate a unique referral code")
            link = referral_repo.add_link(
                session,
                code=code,
                destination_url=data.destination_url,
                short_url=f"{self._public_base_url}/r/{code}",
                campaign_name=data.campaign_name,
                marketer_id=data.marketer_id,
                marketer_name=data.marketer_name,
                click_count=0,
            )
        logger.info("referral.created", code=link.code, marketer_id=data.marketer_id)
        return link

    def get_and_track(self, short_code: str) -> ReferralLink:
        """Count one click on ``short_code`` and return the link. Raises ReferralNotFound."""
        with self._db.session() as session:
            if not referral_repo.increment_clicks(session, short_code):
                raise ReferralNotFound(short_code)
            session.flush()
            link = referral_repo.get_link(session, short_code)
            session.refresh(link)
            return link

    def list_by_marketer(self, marketer_id: str) -> list[ReferralLink]:
        with self._db.session() as session:
            return referral_repo.list_by_marketer(session, marketer_id)
