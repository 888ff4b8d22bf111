"""Customer registry entity."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.identifiers import RequiredText


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Customer(BaseModel):
    """
    A known buyer, unique by phone number.

    Saving a customer whose phone is already registered updates that row
    instead of adding a second one; optional fields left empty keep their
    stored values.
    """

    id: int | None = None
    name: RequiredText
    phone: RequiredText
    shop_name: str | None = None
    address: str | None = None
    gst_number: str | None = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
