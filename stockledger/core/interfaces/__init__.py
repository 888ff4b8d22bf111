"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.interfaces.customer_store import ICustomerStore
from stockledger.core.interfaces.document_store import (
    IBillStore,
    IDealerPaymentStore,
    IPurchaseStore,
)
from stockledger.core.interfaces.stock_store import IStockStore

__all__ = [
    "IStockStore",
    "IBillStore",
    "IPurchaseStore",
    "IDealerPaymentStore",
    "ICatalogStore",
    "ICustomerStore",
]
