"""ORM model for marketer referral short links."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, utcnow


class ReferralLink(Base):
    __tablename__ = "referral_links"

    code: Mapped[str] = mapped_column(String(32), primary_key=True)
    destination_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    short_url: Mapped[str] = mapped_column(String(512), nullable=False)
    campaign_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    marketer_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    marketer_name: Mapped[str] = mapped_column(String(256), nullable=False)
    click_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
