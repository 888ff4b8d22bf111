"""
Transaction engine.

Turns bills and purchase orders into stock deltas and applies them. Every
operation runs the same steps:

1. validate references and quantities (no stock touched)
2. price the document with BillingCalculator
3. pre-check availability of every stock-out row
4. apply the netted deltas through StockLedger (all-or-nothing)
5. persist the document, reverting the deltas if that fails

Edits net the stored document's deltas against the new ones, so a line
moved between warehouses reverts from the old row and lands on the new
one in a single multi-row apply. An edit holds a lock on its document for
the whole read, diff and write, and the write is conditional on the
document version it read; a stale write reverts its deltas.
"""

from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar

from stockledger.config import get_logger
from stockledger.core.entities.bill import Bill, BillLine
from stockledger.core.entities.catalog import Product
from stockledger.core.entities.customer import Customer
from stockledger.core.entities.purchase import PurchaseLine, PurchaseOrder
from stockledger.core.entities.stock import TransactionDelta
from stockledger.core.exceptions import (
    BillNotFoundError,
    DealerNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    PurchaseNotFoundError,
    StaleDocumentError,
    StockRecordNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from stockledger.core.interfaces import (
    IBillStore,
    ICatalogStore,
    ICustomerStore,
    IPurchaseStore,
)
from stockledger.core.services.billing_calculator import BillingCalculator
from stockledger.core.services.keyed_locks import KeyedLocks
from stockledger.core.services.stock_diff import bill_deltas, compute_diff, purchase_deltas
from stockledger.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)

T = TypeVar("T")


class TransactionEngine:
    """
    Purchase and bill lifecycle against the stock ledger.

    Required interfaces for DI:
    - StockLedger: the only writer of stock rows
    - ICatalogStore: product, warehouse and dealer lookups
    - IBillStore / IPurchaseStore: document persistence
    - ICustomerStore (optional): links bills to registered customers by phone
    """

    def __init__(
        self,
        stock_ledger: StockLedger,
        catalog_store: ICatalogStore,
        bill_store: IBillStore,
        purchase_store: IPurchaseStore,
        calculator: BillingCalculator | None = None,
        customer_store: ICustomerStore | None = None,
    ):
        self._ledger = stock_ledger
        self._catalog = catalog_store
        self._bills = bill_store
        self._purchases = purchase_store
        self._calculator = calculator or BillingCalculator()
        self._customers = customer_store
        self._document_locks = KeyedLocks()

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    async def create_purchase(self, draft: PurchaseOrder) -> PurchaseOrder:
        purchase, products = await self._prepare_purchase(draft)
        deltas = purchase_deltas(purchase.lines, _box_sizes(products))

        stored = await self._commit(
            deltas,
            reference=f"purchase:{purchase.invoice_number or 'new'}",
            persist=lambda: self._purchases.create(purchase),
        )
        logger.info(
            "purchase_created",
            purchase_id=stored.id,
            dealer_id=stored.dealer_id,
            lines=len(stored.lines),
            grand_total=str(stored.grand_total),
        )
        return stored

    async def edit_purchase(self, purchase_id: int, draft: PurchaseOrder) -> PurchaseOrder:
        async with self._document_locks.hold(("purchase", purchase_id)):
            existing = await self._purchases.get(purchase_id)
            if existing is None:
                raise PurchaseNotFoundError(purchase_id)

            purchase, products = await self._prepare_purchase(draft)
            purchase = purchase.model_copy(
                update={
                    "id": existing.id,
                    "created_at": existing.created_at,
                    "updated_at": datetime.now(UTC),
                }
            )
            box_sizes = _box_sizes(products)
            diff = compute_diff(
                purchase_deltas(existing.lines, box_sizes),
                purchase_deltas(purchase.lines, box_sizes),
            )

            try:
                stored = await self._commit(
                    diff,
                    reference=f"purchase:{purchase_id}:edit",
                    persist=lambda: self._replace_purchase(purchase, existing.version),
                )
            except (InsufficientStockError, StockRecordNotFoundError, StaleDocumentError) as e:
                logger.warning("purchase_edit_rejected", purchase_id=purchase_id, error=e.message)
                raise

        logger.info("purchase_updated", purchase_id=purchase_id, rows_changed=len(diff))
        return stored

    async def _prepare_purchase(
        self, draft: PurchaseOrder
    ) -> tuple[PurchaseOrder, dict[str, Product]]:
        if await self._catalog.get_dealer(draft.dealer_id) is None:
            raise DealerNotFoundError(draft.dealer_id)
        await self._require_warehouses([draft.warehouse_id])
        if not draft.lines:
            raise ValidationError("lines", "a purchase needs at least one line")

        products = await self._resolve_products(l.product_id for l in draft.lines)
        # Order-level warehouse and the product's box size are snapshotted per line
        lines: list[PurchaseLine] = [
            line.model_copy(
                update={
                    "warehouse_id": draft.warehouse_id,
                    "pieces_per_box": products[line.product_id].pieces_per_box,
                    "product_name": line.product_name or products[line.product_id].name,
                }
            )
            for line in draft.lines
        ]
        purchase = self._calculator.price_purchase(draft.model_copy(update={"lines": lines}))
        _require_positive_quantities(purchase.lines, lambda l: l.total_qty)
        return purchase, products

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    async def create_bill(self, draft: Bill) -> Bill:
        bill, products = await self._prepare_bill(draft)
        deltas = bill_deltas(bill.lines, _box_sizes(products))

        stored = await self._commit(
            deltas,
            reference=f"bill:{bill.bill_number or 'new'}",
            persist=lambda: self._insert_bill(bill),
        )
        logger.info(
            "bill_created",
            bill_id=stored.id,
            lines=len(stored.lines),
            grand_total=str(stored.grand_total),
            balance=str(stored.balance_amount),
        )
        return stored

    async def edit_bill(self, bill_id: int, draft: Bill) -> Bill:
        async with self._document_locks.hold(("bill", bill_id)):
            existing = await self._bills.get(bill_id)
            if existing is None:
                raise BillNotFoundError(bill_id)

            bill, products = await self._prepare_bill(draft)
            bill = bill.model_copy(
                update={
                    "id": existing.id,
                    "bill_number": bill.bill_number or existing.bill_number,
                    "created_at": existing.created_at,
                    "updated_at": datetime.now(UTC),
                }
            )
            # Old lines revert onto the rows they were taken from
            box_sizes = _box_sizes(products)
            diff = compute_diff(
                bill_deltas(existing.lines, box_sizes),
                bill_deltas(bill.lines, box_sizes),
            )

            try:
                stored = await self._commit(
                    diff,
                    reference=f"bill:{bill_id}:edit",
                    persist=lambda: self._replace_bill(bill, existing.version),
                )
            except (InsufficientStockError, StockRecordNotFoundError, StaleDocumentError) as e:
                logger.warning("bill_edit_rejected", bill_id=bill_id, error=e.message)
                raise

        logger.info("bill_updated", bill_id=bill_id, rows_changed=len(diff))
        return stored

    async def _prepare_bill(self, draft: Bill) -> tuple[Bill, dict[str, Product]]:
        if not draft.lines:
            raise ValidationError("lines", "a bill needs at least one line")
        await self._require_warehouses(l.warehouse_id for l in draft.lines)
        products = await self._resolve_products(l.product_id for l in draft.lines)

        lines: list[BillLine] = [
            line.model_copy(
                update={
                    "pieces_per_box": line.pieces_per_box
                    or products[line.product_id].pieces_per_box,
                    "product_name": line.product_name or products[line.product_id].name,
                }
            )
            for line in draft.lines
        ]
        # Raises OverpaidError before any stock is touched
        bill = self._calculator.price_bill(draft.model_copy(update={"lines": lines}))
        _require_positive_quantities(bill.lines, lambda l: l.total_pieces)
        return bill, products

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    async def _commit(
        self,
        deltas: list[TransactionDelta],
        reference: str,
        persist: Callable[[], Awaitable[T]],
    ) -> T:
        """Pre-check, apply deltas, then persist; revert the deltas if persisting fails."""
        await self._ledger.ensure_available(deltas)
        applied = await self._ledger.apply_deltas(deltas, reference=reference)

        try:
            return await persist()
        except Exception as e:
            logger.error("document_persist_failed", reference=reference, error=str(e))
            if applied:
                await self._ledger.compensate(deltas, reference=reference)
            raise

    async def _replace_purchase(
        self, purchase: PurchaseOrder, expected_version: int
    ) -> PurchaseOrder:
        stored = await self._purchases.update(purchase, expected_version=expected_version)
        if stored is None:
            raise StaleDocumentError("Purchase", purchase.id, expected_version)
        return stored

    async def _insert_bill(self, bill: Bill) -> Bill:
        return await self._bills.create(await self._link_customer(bill))

    async def _replace_bill(self, bill: Bill, expected_version: int) -> Bill:
        bill = await self._link_customer(bill)
        stored = await self._bills.update(bill, expected_version=expected_version)
        if stored is None:
            raise StaleDocumentError("Bill", bill.id, expected_version)
        return stored

    async def _link_customer(self, bill: Bill) -> Bill:
        """Register the bill's customer by phone and point the snapshot at the row."""
        info = bill.customer
        if self._customers is None or not (info.phone or "").strip():
            return bill
        customer = await self._customers.upsert(
            Customer(
                name=info.name,
                phone=info.phone,
                shop_name=info.shop_name,
                address=info.address,
                gst_number=info.gst_number,
            )
        )
        return bill.model_copy(
            update={"customer": info.model_copy(update={"customer_id": customer.id})}
        )

    async def _resolve_products(self, product_ids: Iterable[str]) -> dict[str, Product]:
        products: dict[str, Product] = {}
        for product_id in product_ids:
            if product_id in products:
                continue
            product = await self._catalog.get_product(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            products[product_id] = product
        return products

    async def _require_warehouses(self, warehouse_ids: Iterable[str]) -> None:
        for warehouse_id in set(warehouse_ids):
            if await self._catalog.get_warehouse(warehouse_id) is None:
                raise WarehouseNotFoundError(warehouse_id)


def _box_sizes(products: dict[str, Product]) -> dict[str, int]:
    return {product_id: p.pieces_per_box for product_id, p in products.items()}


def _require_positive_quantities(
    lines: list[Any], quantity_of: Callable[[Any], int]
) -> None:
    for index, line in enumerate(lines):
        if quantity_of(line) <= 0:
            raise ValidationError(
                f"lines[{index}]",
                "quantity must be greater than zero",
                value=quantity_of(line),
            )
