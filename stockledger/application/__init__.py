"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that write.
"""

from stockledger.application.dto.requests import (
    AdjustStockRequest,
    BillRequest,
    CreateStockRequest,
    DealerPaymentRequest,
    PurchaseRequest,
    UpdateDealerPaymentRequest,
)
from stockledger.application.dto.responses import (
    BillResponse,
    DealerLedgerResponse,
    DealerPaymentResponse,
    ErrorResponse,
    HealthResponse,
    PurchaseResponse,
    StockAdjustmentResponse,
    StockResponse,
)
from stockledger.application.services import (
    get_billing_calculator,
    get_dealer_ledger,
    get_stock_ledger,
    get_transaction_engine,
    reset_services,
)
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    BuildDealerLedgerUseCase,
    CreateBillUseCase,
    CreatePurchaseUseCase,
    CreateStockUseCase,
    EditBillUseCase,
    EditPurchaseUseCase,
    RecordDealerPaymentUseCase,
    UpdateDealerPaymentUseCase,
)

__all__ = [
    # Request DTOs
    "CreateStockRequest",
    "AdjustStockRequest",
    "BillRequest",
    "PurchaseRequest",
    "DealerPaymentRequest",
    "UpdateDealerPaymentRequest",
    # Response DTOs
    "StockResponse",
    "StockAdjustmentResponse",
    "BillResponse",
    "PurchaseResponse",
    "DealerPaymentResponse",
    "DealerLedgerResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "CreateStockUseCase",
    "AdjustStockUseCase",
    "CreateBillUseCase",
    "EditBillUseCase",
    "CreatePurchaseUseCase",
    "EditPurchaseUseCase",
    "RecordDealerPaymentUseCase",
    "UpdateDealerPaymentUseCase",
    "BuildDealerLedgerUseCase",
    # Service factories
    "get_billing_calculator",
    "get_stock_ledger",
    "get_transaction_engine",
    "get_dealer_ledger",
    "reset_services",
]
