"""Unit tests for dealer entities."""

from datetime import date
from decimal import Decimal

import pydantic
import pytest

from stockledger.core.entities import (
    DealerLedgerReport,
    DealerPayment,
    DealerPaymentMode,
    LedgerSummary,
)


class TestDealerPayment:
    def test_note_is_stripped(self):
        payment = DealerPayment(
            dealer_id="D1",
            amount=Decimal("800"),
            payment_date=date(2024, 3, 5),
            note="  cheque 1142  ",
        )
        assert payment.note == "cheque 1142"

    def test_none_note_becomes_empty(self):
        payment = DealerPayment(
            dealer_id="D1", amount=Decimal("1"), payment_date=date(2024, 3, 5), note=None
        )
        assert payment.note == ""

    def test_default_mode_is_cash(self):
        payment = DealerPayment(dealer_id="D1", amount=Decimal("1"), payment_date=date(2024, 3, 5))
        assert payment.payment_mode == DealerPaymentMode.CASH

    @pytest.mark.parametrize("amount", ["0", "-10"])
    def test_amount_must_be_positive(self, amount: str):
        with pytest.raises(pydantic.ValidationError):
            DealerPayment(dealer_id="D1", amount=Decimal(amount), payment_date=date(2024, 3, 5))

    def test_unknown_mode_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DealerPayment(
                dealer_id="D1",
                amount=Decimal("1"),
                payment_date=date(2024, 3, 5),
                payment_mode="CHEQUE",
            )


class TestDealerLedgerReport:
    def test_empty_report(self):
        report = DealerLedgerReport(
            dealer_id="D1", period_start=date(2024, 3, 1), period_end=date(2024, 3, 31)
        )
        assert report.entries == []
        assert report.summary == LedgerSummary()
        assert report.summary.balance == Decimal("0")
