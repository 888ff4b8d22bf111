"""Unit tests for DealerLedger and month_period."""

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from stockledger.core.entities import (
    Dealer,
    DealerPayment,
    LedgerEntryType,
    PurchaseOrder,
)
from stockledger.core.exceptions import DealerNotFoundError, ValidationError
from stockledger.core.services import DealerLedger, month_period

MARCH = (date(2024, 3, 1), date(2024, 3, 31))


def _purchase(purchase_id: int, day: int, total: str, hour: int = 9) -> PurchaseOrder:
    return PurchaseOrder(
        id=purchase_id,
        dealer_id="D1",
        warehouse_id="W1",
        invoice_number=f"INV-{purchase_id}",
        purchase_date=date(2024, 3, day),
        grand_total=Decimal(total),
        created_at=datetime(2024, 3, day, hour, tzinfo=UTC),
    )


def _payment(payment_id: int, day: int, amount: str, hour: int = 9) -> DealerPayment:
    return DealerPayment(
        id=payment_id,
        dealer_id="D1",
        amount=Decimal(amount),
        payment_date=date(2024, 3, day),
        note="neft",
        created_at=datetime(2024, 3, day, hour, tzinfo=UTC),
    )


@pytest.fixture
def purchase_store() -> AsyncMock:
    store = AsyncMock()
    store.list_for_dealer.return_value = []
    return store


@pytest.fixture
def payment_store() -> AsyncMock:
    store = AsyncMock()
    store.list_for_dealer.return_value = []
    return store


class TestMonthPeriod:
    def test_explicit_month(self):
        assert month_period("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_defaults_to_current_month(self):
        assert month_period(today=date(2023, 11, 17)) == (date(2023, 11, 1), date(2023, 11, 30))

    @pytest.mark.parametrize("month", ["2024-13", "2024-1", "March", "24-03"])
    def test_bad_month(self, month: str):
        with pytest.raises(ValidationError):
            month_period(month)


class TestBuildLedger:
    async def test_running_balance(self, purchase_store: AsyncMock, payment_store: AsyncMock):
        purchase_store.list_for_dealer.return_value = [
            _purchase(1, 2, "1000.00"),
            _purchase(2, 10, "500.00"),
        ]
        payment_store.list_for_dealer.return_value = [_payment(1, 5, "800.00")]

        ledger = DealerLedger(purchase_store, payment_store)
        report = await ledger.build_ledger("D1", *MARCH)

        assert [e.entry_type for e in report.entries] == [
            LedgerEntryType.PURCHASE,
            LedgerEntryType.PAYMENT,
            LedgerEntryType.PURCHASE,
        ]
        assert [e.balance for e in report.entries] == [
            Decimal("1000.00"),
            Decimal("200.00"),
            Decimal("700.00"),
        ]
        assert report.summary.total_purchase == Decimal("1500.00")
        assert report.summary.total_paid == Decimal("800.00")
        assert report.summary.balance == Decimal("700.00")
        purchase_store.list_for_dealer.assert_awaited_once_with("D1", *MARCH)

    async def test_same_day_orders_by_creation_time(
        self, purchase_store: AsyncMock, payment_store: AsyncMock
    ):
        purchase_store.list_for_dealer.return_value = [_purchase(1, 5, "300.00", hour=15)]
        payment_store.list_for_dealer.return_value = [_payment(1, 5, "100.00", hour=10)]

        report = await DealerLedger(purchase_store, payment_store).build_ledger("D1", *MARCH)

        assert report.entries[0].entry_type == LedgerEntryType.PAYMENT
        assert report.entries[0].balance == Decimal("-100.00")
        assert report.entries[1].balance == Decimal("200.00")

    async def test_entry_references(self, purchase_store: AsyncMock, payment_store: AsyncMock):
        purchase_store.list_for_dealer.return_value = [_purchase(4, 1, "10.00")]
        payment_store.list_for_dealer.return_value = [_payment(9, 2, "5.00")]

        report = await DealerLedger(purchase_store, payment_store).build_ledger("D1", *MARCH)

        assert report.entries[0].reference == "INV-4"
        assert report.entries[0].debit == Decimal("10.00")
        assert report.entries[1].reference == "neft"
        assert report.entries[1].credit == Decimal("5.00")

    async def test_empty_period(self, purchase_store: AsyncMock, payment_store: AsyncMock):
        report = await DealerLedger(purchase_store, payment_store).build_ledger("D1", *MARCH)
        assert report.entries == []
        assert report.summary.balance == Decimal("0")

    async def test_inverted_period_rejected(
        self, purchase_store: AsyncMock, payment_store: AsyncMock
    ):
        ledger = DealerLedger(purchase_store, payment_store)
        with pytest.raises(ValidationError):
            await ledger.build_ledger("D1", date(2024, 3, 31), date(2024, 3, 1))
        purchase_store.list_for_dealer.assert_not_called()

    async def test_unknown_dealer(self, purchase_store: AsyncMock, payment_store: AsyncMock):
        catalog = AsyncMock()
        catalog.get_dealer.return_value = None

        ledger = DealerLedger(purchase_store, payment_store, catalog_store=catalog)
        with pytest.raises(DealerNotFoundError):
            await ledger.build_ledger("D9", *MARCH)

    async def test_known_dealer(self, purchase_store: AsyncMock, payment_store: AsyncMock):
        catalog = AsyncMock()
        catalog.get_dealer.return_value = Dealer(id="D1", name="Dealer")

        report = await DealerLedger(purchase_store, payment_store, catalog).build_ledger("D1", *MARCH)
        assert report.dealer_id == "D1"
