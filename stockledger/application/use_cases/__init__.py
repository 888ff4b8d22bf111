"""Application use cases."""

from stockledger.application.use_cases.adjust_stock import AdjustStockUseCase
from stockledger.application.use_cases.build_dealer_ledger import BuildDealerLedgerUseCase
from stockledger.application.use_cases.create_stock import (
    CreateStockUseCase,
    stock_to_response,
)
from stockledger.application.use_cases.record_dealer_payment import (
    RecordDealerPaymentUseCase,
    UpdateDealerPaymentUseCase,
)
from stockledger.application.use_cases.save_bill import CreateBillUseCase, EditBillUseCase
from stockledger.application.use_cases.save_purchase import (
    CreatePurchaseUseCase,
    EditPurchaseUseCase,
)

__all__ = [
    "CreateStockUseCase",
    "AdjustStockUseCase",
    "stock_to_response",
    "CreateBillUseCase",
    "EditBillUseCase",
    "CreatePurchaseUseCase",
    "EditPurchaseUseCase",
    "RecordDealerPaymentUseCase",
    "UpdateDealerPaymentUseCase",
    "BuildDealerLedgerUseCase",
]
