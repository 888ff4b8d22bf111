"""Dealer ledger: purchases and payments merged into a running balance."""

import calendar
import re
from datetime import date
from decimal import Decimal

from stockledger.config import get_logger
from stockledger.core.entities.dealer import (
    DealerLedgerReport,
    LedgerEntry,
    LedgerEntryType,
    LedgerSummary,
)
from stockledger.core.exceptions import DealerNotFoundError, ValidationError
from stockledger.core.interfaces import ICatalogStore, IDealerPaymentStore, IPurchaseStore

logger = get_logger(__name__)

MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")

# Purchases sort ahead of payments recorded at the same instant
_ENTRY_ORDER = {LedgerEntryType.PURCHASE: 0, LedgerEntryType.PAYMENT: 1}


def month_period(month: str | None = None, today: date | None = None) -> tuple[date, date]:
    """
    First and last day of a YYYY-MM month, defaulting to the current month.

    Raises:
        ValidationError: If `month` is not in YYYY-MM form.
    """
    if not month:
        today = today or date.today()
        year, month_number = today.year, today.month
    else:
        match = MONTH_PATTERN.match(month.strip())
        if not match:
            raise ValidationError("month", "expected YYYY-MM", value=month)
        year, month_number = int(match.group(1)), int(match.group(2))

    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


class DealerLedger:
    """
    Read-side aggregation over purchase and dealer payment records.

    Required interfaces for DI:
    - IPurchaseStore: purchases per dealer and period
    - IDealerPaymentStore: payments per dealer and period
    - ICatalogStore: optional, rejects unknown dealers
    """

    def __init__(
        self,
        purchase_store: IPurchaseStore,
        payment_store: IDealerPaymentStore,
        catalog_store: ICatalogStore | None = None,
    ):
        self._purchases = purchase_store
        self._payments = payment_store
        self._catalog = catalog_store

    async def build_ledger(
        self, dealer_id: str, period_start: date, period_end: date
    ) -> DealerLedgerReport:
        """
        Entries dated within [period_start, period_end], oldest first.

        A purchase is a debit (raises what is owed), a payment a credit.
        Ties on date fall back to creation time, then ID.
        """
        if period_start > period_end:
            raise ValidationError(
                "period_start", "must not be after period_end", value=period_start
            )
        if self._catalog and await self._catalog.get_dealer(dealer_id) is None:
            raise DealerNotFoundError(dealer_id)

        purchases = await self._purchases.list_for_dealer(dealer_id, period_start, period_end)
        payments = await self._payments.list_for_dealer(dealer_id, period_start, period_end)

        entries = [
            LedgerEntry(
                entry_type=LedgerEntryType.PURCHASE,
                entry_date=p.purchase_date,
                reference_id=p.id or 0,
                reference=p.invoice_number,
                debit=p.grand_total,
                created_at=p.created_at,
            )
            for p in purchases
        ] + [
            LedgerEntry(
                entry_type=LedgerEntryType.PAYMENT,
                entry_date=p.payment_date,
                reference_id=p.id or 0,
                reference=p.note or None,
                credit=p.amount,
                created_at=p.created_at,
            )
            for p in payments
        ]
        entries.sort(
            key=lambda e: (
                e.entry_date,
                e.created_at,
                _ENTRY_ORDER[e.entry_type],
                e.reference_id,
            )
        )

        balance = Decimal("0")
        for entry in entries:
            balance += entry.debit - entry.credit
            entry.balance = balance

        total_purchase = sum((p.grand_total for p in purchases), Decimal("0"))
        total_paid = sum((p.amount for p in payments), Decimal("0"))
        summary = LedgerSummary(
            total_purchase=total_purchase,
            total_paid=total_paid,
            balance=total_purchase - total_paid,
        )

        logger.info(
            "dealer_ledger_built",
            dealer_id=dealer_id,
            period_start=period_start.isoformat(),
            period_end=period_end.isoformat(),
            entries=len(entries),
            balance=str(summary.balance),
        )
        return DealerLedgerReport(
            dealer_id=dealer_id,
            period_start=period_start,
            period_end=period_end,
            entries=entries,
            summary=summary,
        )
