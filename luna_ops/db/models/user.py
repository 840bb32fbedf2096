"""ORM model for staff and partner users."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from luna_ops.db.base import Base, TimestampMixin, new_id

STAFF_ROLES = ("admin", "sales", "manufacturing", "marketing", "operations")
PARTNER_ROLES = ("influencer", "delivery-partner", "pickup-location-staff")
KNOWN_ROLES = STAFF_ROLES + PARTNER_ROLES


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(256), nullable=False)
    # Comma-separated: "admin,sales"
    roles: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    @property
    def role_list(self) -> list[str]:
        return [r for r in self.roles.split(",") if r]
