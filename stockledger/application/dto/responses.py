"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
Decimal amounts serialize as strings so no precision is lost on the wire.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from stockledger.core.entities import (
    DealerPaymentMode,
    DiscountType,
    LedgerEntryType,
    PaymentMode,
    StockStatus,
)

# --- Stock ---


class StockResponse(BaseModel):
    """Stock read for one (product, warehouse) pair."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: str
    warehouse_id: str
    boxes: int
    loose_items: int
    pieces_per_box: int
    total_pieces: int
    status: StockStatus
    low_stock_boxes: int | None = None
    low_stock_items: int | None = None
    low_stock_threshold: int | None = Field(
        default=None, description="Threshold in pieces"
    )
    version: int
    updated_at: datetime


class StockListResponse(BaseModel):
    records: list[StockResponse]
    total: int


class StockMovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_record_id: int
    pieces_delta: int
    boxes_after: int
    loose_after: int
    reference: str | None = None
    created_at: datetime


class StockAdjustmentResponse(BaseModel):
    """Result of a stock mutation."""

    stock: StockResponse
    pieces_delta: int
    created: bool = Field(default=False, description="True if the row was created")


# --- Bills ---


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    customer_id: int | None = None
    name: str
    phone: str | None = None
    address: str | None = None
    shop_name: str | None = None
    gst_number: str | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mode: PaymentMode
    cash_amount: Decimal
    upi_amount: Decimal
    card_amount: Decimal


class BillLineResponse(BaseModel):
    """Bill line with its computed amounts."""

    model_config = ConfigDict(from_attributes=True)

    product_id: str
    warehouse_id: str
    product_name: str | None = None
    selling_price: Decimal
    tax_percent: Decimal
    quantity_boxes: int
    quantity_loose: int
    pieces_per_box: int | None = None
    discount_type: DiscountType
    discount_value: Decimal
    total_pieces: int
    unit_price_after_discount: Decimal
    gross_amount: Decimal
    tax_amount: Decimal
    amount_before_tax: Decimal
    line_total: Decimal


class BillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bill_number: str | None = None
    customer: CustomerResponse
    bill_date: date
    lines: list[BillLineResponse]
    payment: PaymentResponse
    total_items: int
    total_before_tax: Decimal
    total_tax: Decimal
    grand_total: Decimal
    amount_collected: Decimal
    balance_amount: Decimal
    version: int = 0
    created_at: datetime
    updated_at: datetime


class BillListResponse(BaseModel):
    bills: list[BillResponse]
    total: int


# --- Customers ---


class CustomerRecordResponse(BaseModel):
    """A registered customer."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    shop_name: str | None = None
    address: str | None = None
    gst_number: str | None = None
    created_at: datetime
    updated_at: datetime


class CustomerListResponse(BaseModel):
    customers: list[CustomerRecordResponse]


# --- Purchases ---


class PurchaseLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str
    warehouse_id: str
    product_name: str | None = None
    boxes: int
    loose_items: int
    pieces_per_box: int
    purchase_price: Decimal
    discount_percent: Decimal
    tax_percent: Decimal
    total_qty: int
    gross_amount: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    dealer_id: str
    warehouse_id: str
    invoice_number: str | None = None
    purchase_date: date
    lines: list[PurchaseLineResponse]
    sub_total: Decimal
    tax_total: Decimal
    grand_total: Decimal
    version: int = 0
    created_at: datetime
    updated_at: datetime


class PurchaseListResponse(BaseModel):
    purchases: list[PurchaseResponse]
    total: int


# --- Dealers ---


class DealerPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    dealer_id: str
    amount: Decimal
    payment_mode: DealerPaymentMode
    payment_date: date
    note: str
    created_at: datetime
    updated_at: datetime


class LedgerEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_type: LedgerEntryType = Field(..., description="PURCHASE is a debit, PAYMENT a credit")
    entry_date: date
    reference_id: int
    reference: str | None = None
    debit: Decimal
    credit: Decimal
    balance: Decimal = Field(..., description="Running balance after this entry")


class LedgerSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_purchase: Decimal
    total_paid: Decimal
    balance: Decimal = Field(..., description="Positive = owed to the dealer")


class DealerLedgerResponse(BaseModel):
    dealer_id: str
    period_start: date
    period_end: date
    entries: list[LedgerEntryResponse]
    summary: LedgerSummaryResponse


# --- Catalog ---


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    sku: str | None = None
    pieces_per_box: int
    purchase_price: Decimal
    selling_price: Decimal
    tax_percent: Decimal
    hsn_code: str | None = None


class WarehouseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    location: str | None = None


class DealerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str | None = None
    address: str | None = None
    gstin: str | None = None


# --- Health / errors ---


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
