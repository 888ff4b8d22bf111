"""
Dependency injection container for FastAPI.

Provides service, store and use case instances to route handlers.
"""

from functools import lru_cache

from stockledger.application.services import (
    get_dealer_ledger,
    get_stock_ledger,
    get_transaction_engine,
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
from stockledger.config import Settings, get_settings
from stockledger.core.services import StockLedger
from stockledger.infrastructure.storage.sqlite import (
    SQLiteBillStore,
    SQLiteCatalogStore,
    SQLiteCustomerStore,
    SQLitePurchaseStore,
    get_bill_store,
    get_catalog_store,
    get_customer_store,
    get_purchase_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_ledger() -> StockLedger:
    """Get the process-wide stock ledger."""
    return await get_stock_ledger()


# Store dependencies
async def get_catalog() -> SQLiteCatalogStore:
    return await get_catalog_store()


async def get_customers() -> SQLiteCustomerStore:
    return await get_customer_store()


async def get_bills() -> SQLiteBillStore:
    return await get_bill_store()


async def get_purchases() -> SQLitePurchaseStore:
    return await get_purchase_store()


# Use case dependencies
async def get_create_stock_use_case() -> CreateStockUseCase:
    return CreateStockUseCase(
        stock_ledger=await get_stock_ledger(),
        catalog_store=await get_catalog_store(),
    )


async def get_adjust_stock_use_case() -> AdjustStockUseCase:
    return AdjustStockUseCase(
        stock_ledger=await get_stock_ledger(),
        catalog_store=await get_catalog_store(),
    )


async def get_create_bill_use_case() -> CreateBillUseCase:
    return CreateBillUseCase(engine=await get_transaction_engine())


async def get_edit_bill_use_case() -> EditBillUseCase:
    return EditBillUseCase(engine=await get_transaction_engine())


async def get_create_purchase_use_case() -> CreatePurchaseUseCase:
    return CreatePurchaseUseCase(engine=await get_transaction_engine())


async def get_edit_purchase_use_case() -> EditPurchaseUseCase:
    return EditPurchaseUseCase(engine=await get_transaction_engine())


def get_record_dealer_payment_use_case() -> RecordDealerPaymentUseCase:
    """Stores are resolved lazily by the use case."""
    return RecordDealerPaymentUseCase()


def get_update_dealer_payment_use_case() -> UpdateDealerPaymentUseCase:
    return UpdateDealerPaymentUseCase()


async def get_build_dealer_ledger_use_case() -> BuildDealerLedgerUseCase:
    return BuildDealerLedgerUseCase(dealer_ledger=await get_dealer_ledger())
