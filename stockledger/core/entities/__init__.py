"""Core domain entities."""

from stockledger.core.entities.bill import (
    Bill,
    BillLine,
    CustomerInfo,
    DiscountType,
    Payment,
    PaymentMode,
)
from stockledger.core.entities.catalog import Dealer, Product, Warehouse
from stockledger.core.entities.customer import Customer
from stockledger.core.entities.dealer import (
    DealerLedgerReport,
    DealerPayment,
    DealerPaymentMode,
    LedgerEntry,
    LedgerEntryType,
    LedgerSummary,
)
from stockledger.core.entities.identifiers import EntityId, RequiredText
from stockledger.core.entities.purchase import PurchaseLine, PurchaseOrder
from stockledger.core.entities.stock import (
    StockMovement,
    StockRecord,
    StockStatus,
    TransactionDelta,
)

__all__ = [
    "EntityId",
    "RequiredText",
    # Catalog entities
    "Product",
    "Warehouse",
    "Dealer",
    # Customer registry
    "Customer",
    # Stock entities
    "StockRecord",
    "StockStatus",
    "StockMovement",
    "TransactionDelta",
    # Bill entities
    "Bill",
    "BillLine",
    "CustomerInfo",
    "DiscountType",
    "Payment",
    "PaymentMode",
    # Purchase entities
    "PurchaseOrder",
    "PurchaseLine",
    # Dealer entities
    "DealerPayment",
    "DealerPaymentMode",
    "LedgerEntry",
    "LedgerEntryType",
    "LedgerSummary",
    "DealerLedgerReport",
]
