"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.bill_store import SQLiteBillStore
from stockledger.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.customer_store import SQLiteCustomerStore
from stockledger.infrastructure.storage.sqlite.dealer_payment_store import (
    SQLiteDealerPaymentStore,
)
from stockledger.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseStore
from stockledger.infrastructure.storage.sqlite.stock_store import SQLiteStockStore

# Singleton instances
_stock_store: SQLiteStockStore | None = None
_customer_store: SQLiteCustomerStore | None = None
_bill_store: SQLiteBillStore | None = None
_purchase_store: SQLitePurchaseStore | None = None
_dealer_payment_store: SQLiteDealerPaymentStore | None = None
_catalog_store: SQLiteCatalogStore | None = None


async def get_stock_store() -> SQLiteStockStore:
    """Get singleton stock store instance."""
    global _stock_store
    if _stock_store is None:
        _stock_store = SQLiteStockStore()
    return _stock_store


async def get_bill_store() -> SQLiteBillStore:
    """Get singleton bill store instance."""
    global _bill_store
    if _bill_store is None:
        _bill_store = SQLiteBillStore()
    return _bill_store


async def get_purchase_store() -> SQLitePurchaseStore:
    """Get singleton purchase store instance."""
    global _purchase_store
    if _purchase_store is None:
        _purchase_store = SQLitePurchaseStore()
    return _purchase_store


async def get_dealer_payment_store() -> SQLiteDealerPaymentStore:
    """Get singleton dealer payment store instance."""
    global _dealer_payment_store
    if _dealer_payment_store is None:
        _dealer_payment_store = SQLiteDealerPaymentStore()
    return _dealer_payment_store


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_customer_store() -> SQLiteCustomerStore:
    """Get singleton customer store instance."""
    global _customer_store
    if _customer_store is None:
        _customer_store = SQLiteCustomerStore()
    return _customer_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteStockStore",
    "SQLiteBillStore",
    "SQLitePurchaseStore",
    "SQLiteDealerPaymentStore",
    "SQLiteCatalogStore",
    "SQLiteCustomerStore",
    # Factory functions
    "get_stock_store",
    "get_bill_store",
    "get_purchase_store",
    "get_dealer_payment_store",
    "get_catalog_store",
    "get_customer_store",
]
