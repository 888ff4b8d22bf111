"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import (
    AdjustStockRequest,
    BillLineRequest,
    BillRequest,
    CreateDealerRequest,
    CreateProductRequest,
    CreateStockRequest,
    CreateWarehouseRequest,
    CustomerRequest,
    DealerPaymentRequest,
    PaymentRequest,
    PurchaseLineRequest,
    PurchaseRequest,
    SaveCustomerRequest,
    UpdateDealerPaymentRequest,
    UpdateThresholdsRequest,
)
from stockledger.application.dto.responses import (
    BillLineResponse,
    BillListResponse,
    BillResponse,
    CustomerListResponse,
    CustomerRecordResponse,
    DealerLedgerResponse,
    DealerPaymentResponse,
    DealerResponse,
    ErrorResponse,
    HealthResponse,
    LedgerEntryResponse,
    LedgerSummaryResponse,
    ProductResponse,
    ProviderHealthResponse,
    PurchaseLineResponse,
    PurchaseListResponse,
    PurchaseResponse,
    StockAdjustmentResponse,
    StockListResponse,
    StockMovementResponse,
    StockResponse,
    WarehouseResponse,
)

__all__ = [
    # Requests
    "CreateStockRequest",
    "AdjustStockRequest",
    "UpdateThresholdsRequest",
    "CustomerRequest",
    "BillLineRequest",
    "PaymentRequest",
    "BillRequest",
    "SaveCustomerRequest",
    "PurchaseLineRequest",
    "PurchaseRequest",
    "DealerPaymentRequest",
    "UpdateDealerPaymentRequest",
    "CreateProductRequest",
    "CreateWarehouseRequest",
    "CreateDealerRequest",
    # Responses
    "StockResponse",
    "StockListResponse",
    "StockMovementResponse",
    "StockAdjustmentResponse",
    "BillLineResponse",
    "BillResponse",
    "BillListResponse",
    "CustomerRecordResponse",
    "CustomerListResponse",
    "PurchaseLineResponse",
    "PurchaseResponse",
    "PurchaseListResponse",
    "DealerPaymentResponse",
    "LedgerEntryResponse",
    "LedgerSummaryResponse",
    "DealerLedgerResponse",
    "ProductResponse",
    "WarehouseResponse",
    "DealerResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
