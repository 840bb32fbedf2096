"""ORM model for partner programme applications."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, TimestampMixin, new_id

PARTNER_TYPES = ("influencer", "delivery-partner", "pickup-location")
APPLICATION_STATUSES = ("pending", "approved", "rejected")


class PartnerApplication(Base, TimestampMixin):
    """Request to join as an influencer, delivery partner or pickup location."""

    __tablename__ = "partner_applications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    partner_type: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending", index=True)
