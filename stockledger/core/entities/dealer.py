"""Dealer payment and ledger entities."""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from stockledger.core.entities.identifiers import EntityId


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DealerPaymentMode(str, Enum):
    CASH = "CASH"
    UPI = "UPI"
    CARD = "CARD"


class DealerPayment(BaseModel):
    """Money paid to a dealer. Affects only the dealer ledger."""

    id: int | None = None
    dealer_id: EntityId
    amount: Decimal = Field(gt=0)
    payment_mode: DealerPaymentMode = DealerPaymentMode.CASH
    payment_date: date
    note: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("note", mode="before")
    @classmethod
    def strip_note(cls, v: str | None) -> str:
        return (v or "").strip()


class LedgerEntryType(str, Enum):
    PURCHASE = "PURCHASE"  # debit
    PAYMENT = "PAYMENT"  # credit


class LedgerEntry(BaseModel):
    """One line of a dealer ledger."""

    entry_type: LedgerEntryType
    entry_date: date
    reference_id: int
    reference: str | None = None  # invoice number or payment note
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")  # running balance after this entry
    created_at: datetime


class LedgerSummary(BaseModel):
    total_purchase: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class DealerLedgerReport(BaseModel):
    """Purchases and payments for a dealer over a period."""

    dealer_id: EntityId
    period_start: date
    period_end: date
    entries: list[LedgerEntry] = Field(default_factory=list)
    summary: LedgerSummary = Field(default_factory=LedgerSummary)
