"""Sales bill domain entities."""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from stockledger.core.entities.identifiers import EntityId

ZERO = Decimal("0")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DiscountType(str, Enum):
    """How a line discount is applied to the unit price."""

    NONE = "NONE"
    PERCENT = "PERCENT"
    CASH = "CASH"


class PaymentMode(str, Enum):
    """How a bill was paid."""

    CASH = "CASH"
    UPI = "UPI"
    CARD = "CARD"
    SPLIT = "SPLIT"


class CustomerInfo(BaseModel):
    """Customer snapshot stored on the bill."""

    customer_id: int | None = None  # registry row, linked by phone
    name: str
    phone: str | None = None
    address: str | None = None
    shop_name: str | None = None
    gst_number: str | None = None


class Payment(BaseModel):
    """Amounts collected against a bill."""

    mode: PaymentMode = PaymentMode.CASH
    cash_amount: Decimal = Field(default=ZERO, ge=0)
    upi_amount: Decimal = Field(default=ZERO, ge=0)
    card_amount: Decimal = Field(default=ZERO, ge=0)

    @property
    def total(self) -> Decimal:
        return self.cash_amount + self.upi_amount + self.card_amount


class BillLine(BaseModel):
    """
    One product sold on a bill.

    The input fields come from the caller. total_pieces and the amount fields
    are filled in by BillingCalculator.price_line().
    """

    product_id: EntityId
    warehouse_id: EntityId
    product_name: str | None = None
    selling_price: Decimal = Field(ge=0)  # tax-inclusive unit price
    tax_percent: Decimal = Field(default=ZERO, ge=0, le=100)
    quantity_boxes: int = Field(default=0, ge=0)
    quantity_loose: int = Field(default=0, ge=0)
    pieces_per_box: int | None = Field(default=None, ge=1)  # product value when omitted
    discount_type: DiscountType = DiscountType.NONE
    discount_value: Decimal = Field(default=ZERO, ge=0)

    # Derived
    total_pieces: int = 0
    unit_price_after_discount: Decimal = ZERO
    gross_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    amount_before_tax: Decimal = ZERO
    line_total: Decimal = ZERO


class Bill(BaseModel):
    """A priced sale with its payment."""

    id: int | None = None
    bill_number: str | None = None
    customer: CustomerInfo
    bill_date: date = Field(default_factory=date.today)
    lines: list[BillLine] = Field(default_factory=list)
    payment: Payment = Field(default_factory=Payment)

    total_items: int = 0
    total_before_tax: Decimal = ZERO
    total_tax: Decimal = ZERO
    grand_total: Decimal = ZERO
    amount_collected: Decimal = ZERO
    balance_amount: Decimal = ZERO

    version: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
