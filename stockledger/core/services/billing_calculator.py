"""
Billing calculator.

Pure Decimal arithmetic for both sides of the counter:

- Sales: selling prices are tax-inclusive, so tax is extracted from the
  gross amount as gross * t / (100 + t).
- Purchases: purchase prices are tax-exclusive, so tax is added on top of
  the discounted (taxable) amount.

Line amounts are rounded half-up to the configured number of places. The
untaxed amount of a sales line is gross - tax, which keeps
total_before_tax + total_tax == grand_total exact for every bill.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from stockledger.core.entities.bill import Bill, BillLine, DiscountType, Payment
from stockledger.core.entities.purchase import PurchaseLine, PurchaseOrder
from stockledger.core.exceptions import OverpaidError
from stockledger.core.services.unit_converter import UnitConverter

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass
class BillTotals:
    """Aggregated amounts of a priced bill."""

    lines: list[BillLine] = field(default_factory=list)
    total_items: int = 0
    total_before_tax: Decimal = ZERO
    total_tax: Decimal = ZERO
    grand_total: Decimal = ZERO
    amount_collected: Decimal = ZERO
    balance_amount: Decimal = ZERO


@dataclass
class PurchaseTotals:
    """Aggregated amounts of a priced purchase order."""

    lines: list[PurchaseLine] = field(default_factory=list)
    sub_total: Decimal = ZERO
    tax_total: Decimal = ZERO
    grand_total: Decimal = ZERO


class BillingCalculator:
    """Prices bill and purchase lines and aggregates their totals."""

    def __init__(self, money_places: int = 2):
        self._quantum = Decimal(1).scaleb(-money_places)

    def money(self, value: Decimal) -> Decimal:
        return Decimal(value).quantize(self._quantum, rounding=ROUND_HALF_UP)

    # ------------------------------------------------------------------
    # Sales side
    # ------------------------------------------------------------------

    def discounted_unit_price(
        self,
        selling_price: Decimal,
        discount_type: DiscountType,
        discount_value: Decimal,
    ) -> Decimal:
        """Unit price after the line discount, never below zero."""
        if discount_type == DiscountType.PERCENT:
            price = selling_price - selling_price * discount_value / HUNDRED
        elif discount_type == DiscountType.CASH:
            price = selling_price - discount_value
        else:
            price = selling_price
        return self.money(max(ZERO, price))

    def price_line(self, line: BillLine) -> BillLine:
        """Return a copy of `line` with pieces and amounts filled in."""
        pieces = UnitConverter.to_pieces(
            line.quantity_boxes, line.quantity_loose, line.pieces_per_box
        )
        unit_price = self.discounted_unit_price(
            line.selling_price, line.discount_type, line.discount_value
        )
        gross = self.money(pieces * unit_price)
        if line.tax_percent:
            tax = self.money(gross * line.tax_percent / (HUNDRED + line.tax_percent))
        else:
            tax = self.money(ZERO)

        return line.model_copy(
            update={
                "total_pieces": pieces,
                "unit_price_after_discount": unit_price,
                "gross_amount": gross,
                "tax_amount": tax,
                "amount_before_tax": gross - tax,
                "line_total": gross,
            }
        )

    def validate_payment(self, payment: Payment, grand_total: Decimal) -> None:
        """
        Raises:
            OverpaidError: If cash + upi + card exceeds the grand total.
        """
        if payment.total > grand_total:
            raise OverpaidError(payment.total, grand_total)

    def calculate_bill(self, lines: list[BillLine], payment: Payment) -> BillTotals:
        priced = [self.price_line(line) for line in lines]
        grand_total = self.money(sum((l.gross_amount for l in priced), ZERO))
        self.validate_payment(payment, grand_total)

        collected = self.money(payment.total)
        return BillTotals(
            lines=priced,
            total_items=sum(l.total_pieces for l in priced),
            total_before_tax=self.money(sum((l.amount_before_tax for l in priced), ZERO)),
            total_tax=self.money(sum((l.tax_amount for l in priced), ZERO)),
            grand_total=grand_total,
            amount_collected=collected,
            balance_amount=grand_total - collected,
        )

    def price_bill(self, bill: Bill) -> Bill:
        """Return a copy of `bill` with priced lines, totals and payment checked."""
        totals = self.calculate_bill(bill.lines, bill.payment)
        return bill.model_copy(
            update={
                "lines": totals.lines,
                "total_items": totals.total_items,
                "total_before_tax": totals.total_before_tax,
                "total_tax": totals.total_tax,
                "grand_total": totals.grand_total,
                "amount_collected": totals.amount_collected,
                "balance_amount": totals.balance_amount,
            }
        )

    # ------------------------------------------------------------------
    # Purchase side
    # ------------------------------------------------------------------

    def calculate_purchase_line(self, line: PurchaseLine) -> PurchaseLine:
        qty = UnitConverter.to_pieces(line.boxes, line.loose_items, line.pieces_per_box)
        gross = self.money(qty * line.purchase_price)
        discount_percent = min(max(line.discount_percent, ZERO), HUNDRED)
        discount = self.money(gross * discount_percent / HUNDRED)
        taxable = gross - discount
        tax = self.money(taxable * line.tax_percent / HUNDRED)

        return line.model_copy(
            update={
                "total_qty": qty,
                "gross_amount": gross,
                "discount_amount": discount,
                "taxable_amount": taxable,
                "tax_amount": tax,
                "total_amount": taxable + tax,
            }
        )

    def calculate_purchase_totals(self, lines: list[PurchaseLine]) -> PurchaseTotals:
        priced = [self.calculate_purchase_line(line) for line in lines]
        sub_total = self.money(sum((l.taxable_amount for l in priced), ZERO))
        tax_total = self.money(sum((l.tax_amount for l in priced), ZERO))
        return PurchaseTotals(
            lines=priced,
            sub_total=sub_total,
            tax_total=tax_total,
            grand_total=sub_total + tax_total,
        )

    def price_purchase(self, purchase: PurchaseOrder) -> PurchaseOrder:
        totals = self.calculate_purchase_totals(purchase.lines)
        return purchase.model_copy(
            update={
                "lines": totals.lines,
                "sub_total": totals.sub_total,
                "tax_total": totals.tax_total,
                "grand_total": totals.grand_total,
            }
        )
