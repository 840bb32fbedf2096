"""Pydantic models for outgoing transactional e-mail."""

from typing import Optional

from pydantic import BaseModel, Field


class EmailAddress(BaseModel):
    address: str
    name: Optional[str] = None


class OutgoingEmail(BaseModel):
    """A message as handed to a MailSender."""

    from_: EmailAddress = Field(..., alias="from")
    to: list[EmailAddress]
    subject: str
    html_body: str

    model_config = {"populate_by_name": True}
