"""Integration tests: ledger, engine and stores against a temporary SQLite database."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from stockledger.application.services import (
    get_dealer_ledger,
    get_stock_ledger,
    get_transaction_engine,
)
from stockledger.core.entities import (
    Bill,
    BillLine,
    CustomerInfo,
    DealerPayment,
    DealerPaymentMode,
    Payment,
    PurchaseLine,
    PurchaseOrder,
    TransactionDelta,
)
from stockledger.core.exceptions import (
    InsufficientStockError,
    OverpaidError,
    StaleDocumentError,
)
from stockledger.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    get_customer_store,
    get_dealer_payment_store,
)

pytestmark = pytest.mark.integration


@pytest.fixture
async def catalog(db_pool, product, other_product, warehouse, other_warehouse, dealer):
    store = SQLiteCatalogStore()
    for p in (product, other_product):
        await store.create_product(p)
    for w in (warehouse, other_warehouse):
        await store.create_warehouse(w)
    await store.create_dealer(dealer)
    return store


def _purchase(warehouse_id: str = "W1", boxes: int = 2) -> PurchaseOrder:
    return PurchaseOrder(
        dealer_id="D1",
        warehouse_id=warehouse_id,
        invoice_number="INV-1",
        purchase_date=date(2024, 3, 5),
        lines=[
            PurchaseLine(
                product_id="P1",
                warehouse_id=warehouse_id,
                boxes=boxes,
                purchase_price=Decimal("80.00"),
                discount_percent=Decimal("5"),
                tax_percent=Decimal("18"),
            )
        ],
    )


def _bill(loose: int, cash: str = "0", warehouse_id: str = "W1") -> Bill:
    return Bill(
        customer=CustomerInfo(name="Walk-in"),
        bill_date=date(2024, 3, 6),
        lines=[
            BillLine(
                product_id="P1",
                warehouse_id=warehouse_id,
                selling_price=Decimal("118.00"),
                tax_percent=Decimal("18"),
                quantity_loose=loose,
            )
        ],
        payment=Payment(cash_amount=Decimal(cash)),
    )


@pytest.mark.usefixtures("catalog")
class TestStockFlows:
    async def test_box_loose_renormalization(self):
        ledger = await get_stock_ledger()
        await ledger.create("P1", "W1", pieces_per_box=12, boxes=10, loose=5)

        record = await ledger.apply_delta("P1", "W1", -7, reference="bill:1")

        assert (record.boxes, record.loose_items) == (9, 10)
        movements = await ledger.movements(record.id)
        assert [(m.pieces_delta, m.boxes_after, m.loose_after) for m in movements] == [
            (-7, 9, 10),
            (125, 10, 5),
        ]

    async def test_concurrent_deltas_conserve_total(self):
        ledger = await get_stock_ledger()
        await ledger.create("P1", "W1", pieces_per_box=12, boxes=10)

        deltas = [-3, 5, -1, 7, -2, 4, -6, 1] * 3
        await asyncio.gather(*(ledger.apply_delta("P1", "W1", d) for d in deltas))

        record = await ledger.get("P1", "W1")
        assert record.total_pieces == 120 + sum(deltas)
        assert record.version == len(deltas)

    async def test_concurrent_stock_outs_never_go_negative(self):
        ledger = await get_stock_ledger()
        await ledger.create("P1", "W1", pieces_per_box=12, loose=20)

        results = await asyncio.gather(
            *(ledger.apply_delta("P1", "W1", -1) for _ in range(25)),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 5
        assert all(isinstance(f, InsufficientStockError) for f in failures)
        assert (await ledger.get("P1", "W1")).total_pieces == 0

    async def test_multi_row_apply_is_all_or_nothing(self):
        ledger = await get_stock_ledger()
        await ledger.create("P1", "W1", pieces_per_box=12, boxes=1)
        await ledger.create("P2", "W1", pieces_per_box=4, loose=2)

        with pytest.raises(InsufficientStockError):
            await ledger.apply_deltas(
                [
                    TransactionDelta(product_id="P1", warehouse_id="W1", pieces=-5),
                    TransactionDelta(product_id="P2", warehouse_id="W1", pieces=-3),
                ],
                reference="bill:9",
            )

        assert (await ledger.get("P1", "W1")).total_pieces == 12
        assert (await ledger.get("P2", "W1")).total_pieces == 2


@pytest.mark.usefixtures("catalog")
class TestDocumentFlows:
    async def test_purchase_then_bill(self):
        engine = await get_transaction_engine()
        ledger = await get_stock_ledger()

        await engine.create_purchase(_purchase())
        bill = await engine.create_bill(_bill(loose=10, cash="1180.00"))

        assert bill.id is not None
        assert bill.grand_total == Decimal("1180.00")
        record = await ledger.get("P1", "W1")
        assert (record.boxes, record.loose_items) == (1, 2)

    async def test_purchase_move_after_sale_changes_nothing(self):
        engine = await get_transaction_engine()
        ledger = await get_stock_ledger()
        purchase = await engine.create_purchase(_purchase())
        await engine.create_bill(_bill(loose=20))

        with pytest.raises(InsufficientStockError):
            await engine.edit_purchase(purchase.id, _purchase(warehouse_id="W2"))

        assert (await ledger.get("P1", "W1")).total_pieces == 4
        assert await ledger.list_records(warehouse_id="W2") == []
        stored = await engine._purchases.get(purchase.id)
        assert stored.warehouse_id == "W1"

    async def test_overpaid_bill_changes_nothing(self):
        engine = await get_transaction_engine()
        ledger = await get_stock_ledger()
        await engine.create_purchase(_purchase())

        with pytest.raises(OverpaidError):
            await engine.create_bill(_bill(loose=1, cash="500.00"))

        assert (await ledger.get("P1", "W1")).total_pieces == 24
        assert await engine._bills.list_bills() == []

    async def test_bill_edit_between_warehouses(self):
        engine = await get_transaction_engine()
        ledger = await get_stock_ledger()
        await engine.create_purchase(_purchase("W1"))
        await engine.create_purchase(_purchase("W2"))
        bill = await engine.create_bill(_bill(loose=6, warehouse_id="W1"))

        await engine.edit_bill(bill.id, _bill(loose=6, warehouse_id="W2"))

        assert (await ledger.get("P1", "W1")).total_pieces == 24
        assert (await ledger.get("P1", "W2")).total_pieces == 18
        references = [m.reference for m in await ledger.movements((await ledger.get("P1", "W2")).id)]
        assert references[0] == f"bill:{bill.id}:edit"

    async def test_dealer_ledger_over_real_stores(self):
        engine = await get_transaction_engine()
        await engine.create_purchase(_purchase())
        payments = await get_dealer_payment_store()
        await payments.create(
            DealerPayment(
                dealer_id="D1",
                amount=Decimal("1000.00"),
                payment_mode=DealerPaymentMode.CASH,
                payment_date=date(2024, 3, 20),
            )
        )

        report = await (await get_dealer_ledger()).build_ledger(
            "D1", date(2024, 3, 1), date(2024, 3, 31)
        )

        assert [e.balance for e in report.entries] == [Decimal("2152.32"), Decimal("1152.32")]
        assert report.summary.balance == Decimal("1152.32")

    async def test_simultaneous_bill_edits_apply_once(self):
        engine = await get_transaction_engine()
        ledger = await get_stock_ledger()
        await engine.create_purchase(_purchase())
        bill = await engine.create_bill(_bill(loose=10))

        await asyncio.gather(
            engine.edit_bill(bill.id, _bill(loose=5)),
            engine.edit_bill(bill.id, _bill(loose=5)),
        )

        assert (await ledger.get("P1", "W1")).total_pieces == 19
        stored = await engine._bills.get(bill.id)
        assert stored.version == 2
        assert stored.lines[0].quantity_loose == 5

    async def test_simultaneous_purchase_edits_apply_once(self):
        engine = await get_transaction_engine()
        ledger = await get_stock_ledger()
        purchase = await engine.create_purchase(_purchase())

        await asyncio.gather(
            engine.edit_purchase(purchase.id, _purchase(boxes=3)),
            engine.edit_purchase(purchase.id, _purchase(boxes=3)),
        )

        assert (await ledger.get("P1", "W1")).total_pieces == 36
        assert (await engine._purchases.get(purchase.id)).version == 2

    async def test_bill_edits_from_separate_engines_never_double_revert(self):
        ledger = await get_stock_ledger()
        first = await get_transaction_engine(stock_ledger=ledger)
        second = await get_transaction_engine(stock_ledger=ledger)
        await first.create_purchase(_purchase())
        bill = await first.create_bill(_bill(loose=10))

        results = await asyncio.gather(
            first.edit_bill(bill.id, _bill(loose=5)),
            second.edit_bill(bill.id, _bill(loose=5)),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert all(isinstance(f, StaleDocumentError) for f in failures)
        assert (await ledger.get("P1", "W1")).total_pieces == 19
        stored = await first._bills.get(bill.id)
        assert stored.version == 2 - len(failures)
        assert stored.lines[0].quantity_loose == 5

    async def test_bill_links_customer_by_phone(self):
        engine = await get_transaction_engine()
        await engine.create_purchase(_purchase())
        draft = _bill(loose=2)
        draft.customer = CustomerInfo(name="Ravi", phone="9876543210")

        bill = await engine.create_bill(draft)

        customer = await (await get_customer_store()).get_by_phone("9876543210")
        assert customer.name == "Ravi"
        assert (await engine._bills.get(bill.id)).customer.customer_id == customer.id
