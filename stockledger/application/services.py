"""
Service factory functions for dependency injection.

This module wires the SQLite stores into the core services. Use cases and
API dependencies import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from stockledger.config import get_settings
from stockledger.core.services import (
    BillingCalculator,
    DealerLedger,
    StockLedger,
    TransactionEngine,
)

if TYPE_CHECKING:
    from stockledger.core.interfaces import (
        IBillStore,
        ICatalogStore,
        ICustomerStore,
        IDealerPaymentStore,
        IPurchaseStore,
        IStockStore,
    )


# Singleton service instances
_billing_calculator: BillingCalculator | None = None
_stock_ledger: StockLedger | None = None
_transaction_engine: TransactionEngine | None = None
_dealer_ledger: DealerLedger | None = None


def get_billing_calculator() -> BillingCalculator:
    """Get or create the BillingCalculator with configured rounding."""
    global _billing_calculator
    if _billing_calculator is None:
        _billing_calculator = BillingCalculator(
            money_places=get_settings().ledger.money_places
        )
    return _billing_calculator


async def get_stock_ledger(stock_store: "IStockStore | None" = None) -> StockLedger:
    """
    Get or create the StockLedger instance.

    The singleton matters: per-row locks live on the instance, so every
    caller in the process must share it.

    Args:
        stock_store: Optional stock store override (not cached)
    """
    global _stock_ledger

    if stock_store is not None:
        return StockLedger(stock_store=stock_store)
    if _stock_ledger is not None:
        return _stock_ledger

    # Lazy import infrastructure to avoid circular imports
    from stockledger.infrastructure.storage.sqlite import get_stock_store

    _stock_ledger = StockLedger(stock_store=await get_stock_store())
    return _stock_ledger


async def get_transaction_engine(
    stock_ledger: StockLedger | None = None,
    catalog_store: "ICatalogStore | None" = None,
    bill_store: "IBillStore | None" = None,
    purchase_store: "IPurchaseStore | None" = None,
    customer_store: "ICustomerStore | None" = None,
) -> TransactionEngine:
    """
    Get or create the TransactionEngine instance.

    Any override returns a fresh, uncached engine.
    """
    global _transaction_engine

    overridden = any(
        d is not None
        for d in (stock_ledger, catalog_store, bill_store, purchase_store, customer_store)
    )
    if _transaction_engine is not None and not overridden:
        return _transaction_engine

    from stockledger.infrastructure.storage.sqlite import (
        get_bill_store,
        get_catalog_store,
        get_customer_store,
        get_purchase_store,
    )

    engine = TransactionEngine(
        stock_ledger=stock_ledger or await get_stock_ledger(),
        catalog_store=catalog_store or await get_catalog_store(),
        bill_store=bill_store or await get_bill_store(),
        purchase_store=purchase_store or await get_purchase_store(),
        calculator=get_billing_calculator(),
        customer_store=customer_store or await get_customer_store(),
    )

    if not overridden:
        _transaction_engine = engine
    return engine


async def get_dealer_ledger(
    purchase_store: "IPurchaseStore | None" = None,
    payment_store: "IDealerPaymentStore | None" = None,
    catalog_store: "ICatalogStore | None" = None,
) -> DealerLedger:
    """Get or create the DealerLedger instance."""
    global _dealer_ledger

    overridden = any(d is not None for d in (purchase_store, payment_store, catalog_store))
    if _dealer_ledger is not None and not overridden:
        return _dealer_ledger

    from stockledger.infrastructure.storage.sqlite import (
        get_catalog_store,
        get_dealer_payment_store,
        get_purchase_store,
    )

    ledger = DealerLedger(
        purchase_store=purchase_store or await get_purchase_store(),
        payment_store=payment_store or await get_dealer_payment_store(),
        catalog_store=catalog_store or await get_catalog_store(),
    )

    if not overridden:
        _dealer_ledger = ledger
    return ledger


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _billing_calculator
    global _stock_ledger
    global _transaction_engine
    global _dealer_ledger

    _billing_calculator = None
    _stock_ledger = None
    _transaction_engine = None
    _dealer_ledger = None


__all__ = [
    "get_billing_calculator",
    "get_stock_ledger",
    "get_transaction_engine",
    "get_dealer_ledger",
    "reset_services",
]
