"""
Core business logic services.

Layer-pure services that depend only on:
- stockledger/core/entities/*
- stockledger/core/interfaces/*
- stockledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stockledger.core.services.billing_calculator import (
    BillingCalculator,
    BillTotals,
    PurchaseTotals,
)
from stockledger.core.services.dealer_ledger import DealerLedger, month_period
from stockledger.core.services.keyed_locks import KeyedLocks
from stockledger.core.services.stock_diff import (
    bill_deltas,
    compute_diff,
    net_deltas,
    purchase_deltas,
)
from stockledger.core.services.stock_ledger import StockLedger
from stockledger.core.services.transaction_engine import TransactionEngine
from stockledger.core.services.unit_converter import UnitConverter

__all__ = [
    # Units
    "UnitConverter",
    # Stock
    "StockLedger",
    "KeyedLocks",
    "compute_diff",
    "net_deltas",
    "bill_deltas",
    "purchase_deltas",
    # Billing
    "BillingCalculator",
    "BillTotals",
    "PurchaseTotals",
    # Transactions
    "TransactionEngine",
    # Dealer ledger
    "DealerLedger",
    "month_period",
]
