"""Purchase order domain entities."""

from datetime import UTC, date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.identifiers import EntityId

ZERO = Decimal("0")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PurchaseLine(BaseModel):
    """
    One product received on a purchase order.

    purchase_price is tax-exclusive; tax is added on top of the discounted
    amount. The amount fields are filled in by
    BillingCalculator.calculate_purchase_line().
    """

    product_id: EntityId
    warehouse_id: EntityId
    product_name: str | None = None
    boxes: int = Field(default=0, ge=0)
    loose_items: int = Field(default=0, ge=0)
    pieces_per_box: int = Field(default=1, ge=1)  # snapshot from the product
    purchase_price: Decimal = Field(default=ZERO, ge=0)
    discount_percent: Decimal = Field(default=ZERO, ge=0, le=100)
    tax_percent: Decimal = Field(default=ZERO, ge=0, le=100)

    # Derived
    total_qty: int = 0
    gross_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total_amount: Decimal = ZERO


class PurchaseOrder(BaseModel):
    """Stock received from a dealer into one warehouse."""

    id: int | None = None
    dealer_id: EntityId
    warehouse_id: EntityId
    invoice_number: str | None = None
    purchase_date: date = Field(default_factory=date.today)
    lines: list[PurchaseLine] = Field(default_factory=list)

    sub_total: Decimal = ZERO
    tax_total: Decimal = ZERO
    grand_total: Decimal = ZERO

    version: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
