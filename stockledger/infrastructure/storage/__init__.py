"""Storage infrastructure implementations."""

from stockledger.infrastructure.storage.sqlite import (
    SQLiteBillStore,
    SQLiteCatalogStore,
    SQLiteDealerPaymentStore,
    SQLitePurchaseStore,
    SQLiteStockStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteStockStore",
    "SQLiteBillStore",
    "SQLitePurchaseStore",
    "SQLiteDealerPaymentStore",
    "SQLiteCatalogStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
