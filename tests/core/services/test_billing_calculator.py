"""Unit tests for BillingCalculator."""

from decimal import Decimal

import pytest

from stockledger.core.entities import (
    Bill,
    BillLine,
    CustomerInfo,
    DiscountType,
    Payment,
    PaymentMode,
    PurchaseLine,
    PurchaseOrder,
)
from stockledger.core.exceptions import InvalidUnitError, OverpaidError
from stockledger.core.services import BillingCalculator


def _line(**overrides) -> BillLine:
    values = {
        "product_id": "P1",
        "warehouse_id": "W1",
        "selling_price": Decimal("118.00"),
        "tax_percent": Decimal("18"),
        "quantity_loose": 10,
        "pieces_per_box": 12,
    }
    values.update(overrides)
    return BillLine(**values)


@pytest.fixture
def calculator() -> BillingCalculator:
    return BillingCalculator()


class TestMoney:
    def test_rounds_half_up(self, calculator: BillingCalculator):
        assert calculator.money(Decimal("2.345")) == Decimal("2.35")
        assert calculator.money(Decimal("2.344")) == Decimal("2.34")

    def test_custom_places(self):
        assert BillingCalculator(money_places=0).money(Decimal("10.5")) == Decimal("11")


class TestDiscountedUnitPrice:
    def test_no_discount(self, calculator: BillingCalculator):
        price = calculator.discounted_unit_price(Decimal("118"), DiscountType.NONE, Decimal("5"))
        assert price == Decimal("118.00")

    def test_percent(self, calculator: BillingCalculator):
        price = calculator.discounted_unit_price(Decimal("118"), DiscountType.PERCENT, Decimal("10"))
        assert price == Decimal("106.20")

    def test_cash(self, calculator: BillingCalculator):
        price = calculator.discounted_unit_price(Decimal("118"), DiscountType.CASH, Decimal("18"))
        assert price == Decimal("100.00")

    def test_cash_never_below_zero(self, calculator: BillingCalculator):
        price = calculator.discounted_unit_price(Decimal("10"), DiscountType.CASH, Decimal("25"))
        assert price == Decimal("0.00")


class TestPriceLine:
    def test_tax_inclusive_extraction(self, calculator: BillingCalculator):
        line = calculator.price_line(_line())

        assert line.total_pieces == 10
        assert line.gross_amount == Decimal("1180.00")
        assert line.tax_amount == Decimal("180.00")
        assert line.amount_before_tax == Decimal("1000.00")
        assert line.line_total == Decimal("1180.00")

    def test_boxes_and_loose(self, calculator: BillingCalculator):
        line = calculator.price_line(_line(quantity_boxes=2, quantity_loose=3))
        assert line.total_pieces == 27
        assert line.gross_amount == Decimal("3186.00")

    def test_percent_discount(self, calculator: BillingCalculator):
        line = calculator.price_line(
            _line(quantity_loose=5, discount_type=DiscountType.PERCENT, discount_value=Decimal("10"))
        )
        assert line.unit_price_after_discount == Decimal("106.20")
        assert line.gross_amount == Decimal("531.00")
        assert line.tax_amount == Decimal("81.00")
        assert line.amount_before_tax == Decimal("450.00")

    def test_cash_discount_rounding_keeps_parts_consistent(self, calculator: BillingCalculator):
        line = calculator.price_line(
            _line(quantity_loose=3, discount_type=DiscountType.CASH, discount_value=Decimal("18"))
        )
        assert line.gross_amount == Decimal("300.00")
        assert line.tax_amount == Decimal("45.76")
        assert line.amount_before_tax == Decimal("254.24")
        assert line.amount_before_tax + line.tax_amount == line.gross_amount

    def test_zero_tax(self, calculator: BillingCalculator):
        line = calculator.price_line(_line(tax_percent=Decimal("0")))
        assert line.tax_amount == Decimal("0.00")
        assert line.amount_before_tax == line.gross_amount

    def test_missing_box_size_rejected(self, calculator: BillingCalculator):
        with pytest.raises(InvalidUnitError):
            calculator.price_line(_line(pieces_per_box=None))


class TestCalculateBill:
    def test_totals(self, calculator: BillingCalculator):
        lines = [_line(), _line(product_id="P2", quantity_loose=1, selling_price=Decimal("59.00"))]
        totals = calculator.calculate_bill(lines, Payment(cash_amount=Decimal("1000")))

        assert totals.total_items == 11
        assert totals.grand_total == Decimal("1239.00")
        assert totals.total_tax == Decimal("189.00")
        assert totals.total_before_tax == Decimal("1050.00")
        assert totals.total_before_tax + totals.total_tax == totals.grand_total
        assert totals.amount_collected == Decimal("1000.00")
        assert totals.balance_amount == Decimal("239.00")

    def test_exact_payment_leaves_zero_balance(self, calculator: BillingCalculator):
        payment = Payment(
            mode=PaymentMode.SPLIT, cash_amount=Decimal("1000"), upi_amount=Decimal("180")
        )
        totals = calculator.calculate_bill([_line()], payment)
        assert totals.balance_amount == Decimal("0.00")

    def test_overpaid_rejected(self, calculator: BillingCalculator):
        payment = Payment(cash_amount=Decimal("1000"), card_amount=Decimal("200"))
        with pytest.raises(OverpaidError) as exc_info:
            calculator.calculate_bill([_line()], payment)
        assert exc_info.value.details["grand_total"] == "1180.00"

    def test_price_bill_copies_totals(self, calculator: BillingCalculator):
        bill = Bill(customer=CustomerInfo(name="Walk-in"), lines=[_line()])
        priced = calculator.price_bill(bill)

        assert priced.grand_total == Decimal("1180.00")
        assert priced.lines[0].tax_amount == Decimal("180.00")
        assert bill.grand_total == Decimal("0")


class TestPurchaseSide:
    def test_tax_added_on_discounted_amount(self, calculator: BillingCalculator):
        line = calculator.calculate_purchase_line(
            PurchaseLine(
                product_id="P1",
                warehouse_id="W1",
                boxes=2,
                loose_items=4,
                pieces_per_box=12,
                purchase_price=Decimal("80.00"),
                discount_percent=Decimal("10"),
                tax_percent=Decimal("18"),
            )
        )
        assert line.total_qty == 28
        assert line.gross_amount == Decimal("2240.00")
        assert line.discount_amount == Decimal("224.00")
        assert line.taxable_amount == Decimal("2016.00")
        assert line.tax_amount == Decimal("362.88")
        assert line.total_amount == Decimal("2378.88")

    def test_price_purchase_totals(self, calculator: BillingCalculator):
        order = PurchaseOrder(
            dealer_id="D1",
            warehouse_id="W1",
            lines=[
                PurchaseLine(
                    product_id="P1",
                    warehouse_id="W1",
                    boxes=1,
                    pieces_per_box=10,
                    purchase_price=Decimal("100"),
                ),
                PurchaseLine(
                    product_id="P2",
                    warehouse_id="W1",
                    loose_items=5,
                    purchase_price=Decimal("20"),
                    tax_percent=Decimal("5"),
                ),
            ],
        )
        priced = calculator.price_purchase(order)

        assert priced.sub_total == Decimal("1100.00")
        assert priced.tax_total == Decimal("5.00")
        assert priced.grand_total == Decimal("1105.00")
