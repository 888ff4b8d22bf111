"""Request DTOs for API endpoints.

Pydantic v2 models for request validation. Product, warehouse and dealer
references are normalized here, once, as EntityId.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from stockledger.core.entities import (
    DealerPaymentMode,
    DiscountType,
    EntityId,
    PaymentMode,
    RequiredText,
)

# --- Stock ---


class CreateStockRequest(BaseModel):
    """Request to open a stock row for a (product, warehouse) pair."""

    product_id: EntityId = Field(..., description="Product ID")
    warehouse_id: EntityId = Field(..., description="Warehouse ID")
    pieces_per_box: int | None = Field(
        default=None,
        ge=1,
        description="Pieces per box (defaults to the product's value)",
    )
    boxes: int = Field(default=0, ge=0, description="Opening full boxes")
    loose_items: int = Field(default=0, ge=0, description="Opening loose pieces")
    low_stock_boxes: int | None = Field(default=None, ge=0)
    low_stock_items: int | None = Field(default=None, ge=0)


class AdjustStockRequest(BaseModel):
    """
    Signed stock mutation.

    Either pieces_delta, or boxes_delta and/or loose_delta, which are
    converted to pieces with pieces_per_box.
    """

    product_id: EntityId = Field(..., description="Product ID")
    warehouse_id: EntityId = Field(..., description="Warehouse ID")
    pieces_per_box: int | None = Field(
        default=None,
        ge=1,
        description="Pieces per box (defaults to the product's value)",
    )
    boxes_delta: int | None = Field(default=None, description="Signed change in boxes")
    loose_delta: int | None = Field(default=None, description="Signed change in loose pieces")
    pieces_delta: int | None = Field(default=None, description="Pre-computed signed pieces")
    reference: str | None = Field(default=None, description="Audit reference")

    @model_validator(mode="after")
    def check_one_form(self) -> "AdjustStockRequest":
        unit_form = self.boxes_delta is not None or self.loose_delta is not None
        if self.pieces_delta is not None and unit_form:
            raise ValueError("give pieces_delta or boxes_delta/loose_delta, not both")
        if self.pieces_delta is None and not unit_form:
            raise ValueError("one of pieces_delta, boxes_delta, loose_delta is required")
        return self


class UpdateThresholdsRequest(BaseModel):
    """Low-stock thresholds for a stock row. Null clears a threshold."""

    low_stock_boxes: int | None = Field(default=None, ge=0)
    low_stock_items: int | None = Field(default=None, ge=0)


# --- Bills ---


class CustomerRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Customer name")
    phone: str | None = None
    address: str | None = None
    shop_name: str | None = None
    gst_number: str | None = None


class BillLineRequest(BaseModel):
    """One product line on a bill."""

    product_id: EntityId
    warehouse_id: EntityId
    product_name: str | None = None
    selling_price: Decimal = Field(..., ge=0, description="Tax-inclusive unit price")
    tax_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    quantity_boxes: int = Field(default=0, ge=0)
    quantity_loose: int = Field(default=0, ge=0)
    pieces_per_box: int | None = Field(
        default=None, ge=1, description="Defaults to the product's value"
    )
    discount_type: DiscountType = DiscountType.NONE
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)


class PaymentRequest(BaseModel):
    mode: PaymentMode = PaymentMode.CASH
    cash_amount: Decimal = Field(default=Decimal("0"), ge=0)
    upi_amount: Decimal = Field(default=Decimal("0"), ge=0)
    card_amount: Decimal = Field(default=Decimal("0"), ge=0)


class BillRequest(BaseModel):
    """Create or edit a bill. On edit the lines replace the stored ones."""

    bill_number: str | None = None
    customer: CustomerRequest
    bill_date: date | None = Field(default=None, description="Defaults to today")
    lines: list[BillLineRequest] = Field(..., min_length=1)
    payment: PaymentRequest = Field(default_factory=PaymentRequest)


# --- Customers ---


class SaveCustomerRequest(BaseModel):
    """Register a customer; a phone number already on file updates that customer."""

    name: RequiredText
    phone: RequiredText
    shop_name: str | None = None
    address: str | None = None
    gst_number: str | None = None


# --- Purchases ---


class PurchaseLineRequest(BaseModel):
    """One product line on a purchase order."""

    product_id: EntityId
    product_name: str | None = None
    boxes: int = Field(default=0, ge=0)
    loose_items: int = Field(default=0, ge=0)
    purchase_price: Decimal = Field(..., ge=0, description="Tax-exclusive unit price")
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    tax_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class PurchaseRequest(BaseModel):
    """Create or edit a purchase order received into one warehouse."""

    dealer_id: EntityId
    warehouse_id: EntityId
    invoice_number: str | None = None
    purchase_date: date | None = Field(default=None, description="Defaults to today")
    lines: list[PurchaseLineRequest] = Field(..., min_length=1)


# --- Dealer payments ---


class DealerPaymentRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    payment_mode: DealerPaymentMode = DealerPaymentMode.CASH
    payment_date: date
    note: str | None = None


class UpdateDealerPaymentRequest(BaseModel):
    """Partial update; only the fields given are changed."""

    amount: Decimal | None = Field(default=None, gt=0)
    payment_mode: DealerPaymentMode | None = None
    payment_date: date | None = None
    note: str | None = None


# --- Catalog ---


class CreateProductRequest(BaseModel):
    id: EntityId
    name: str = Field(..., min_length=1)
    sku: str | None = None
    pieces_per_box: int = Field(default=1, ge=1)
    purchase_price: Decimal = Field(default=Decimal("0"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    tax_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    hsn_code: str | None = None


class CreateWarehouseRequest(BaseModel):
    id: EntityId
    name: str = Field(..., min_length=1)
    location: str | None = None


class CreateDealerRequest(BaseModel):
    id: EntityId
    name: str = Field(..., min_length=1)
    phone: str | None = None
    address: str | None = None
    gstin: str | None = None
