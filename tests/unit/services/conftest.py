"""In-memory store fakes for service tests."""

from itertools import count

import pytest

from stockledger.core.entities import (
    Bill,
    Customer,
    Dealer,
    Product,
    PurchaseOrder,
    StockMovement,
    StockRecord,
    Warehouse,
)
from stockledger.core.exceptions import AlreadyExistsError, StockAlreadyExistsError
from stockledger.core.interfaces import (
    IBillStore,
    ICatalogStore,
    ICustomerStore,
    IPurchaseStore,
    IStockStore,
)
from stockledger.core.services import StockLedger, TransactionEngine


class InMemoryStockStore(IStockStore):
    """Dict-backed stock store with the same version check as SQLite."""

    def __init__(self):
        self.records: dict[tuple[str, str], StockRecord] = {}
        self.movements: list[StockMovement] = []
        self.stale_writes = 0  # next N updates report a version conflict
        self._ids = count(1)

    async def get(self, product_id, warehouse_id):
        return self.records.get((product_id, warehouse_id))

    async def get_by_id(self, record_id):
        return next((r for r in self.records.values() if r.id == record_id), None)

    async def create(self, record):
        key = (record.product_id, record.warehouse_id)
        if key in self.records:
            raise StockAlreadyExistsError(*key)
        stored = record.model_copy(update={"id": next(self._ids)})
        self.records[key] = stored
        return stored

    async def update(self, record, expected_version):
        key = (record.product_id, record.warehouse_id)
        current = self.records.get(key)
        if self.stale_writes:
            self.stale_writes -= 1
            return None
        if current is None or current.version != expected_version:
            return None
        stored = record.model_copy(update={"version": expected_version + 1})
        self.records[key] = stored
        return stored

    async def delete(self, product_id, warehouse_id):
        return self.records.pop((product_id, warehouse_id), None) is not None

    async def list_records(self, product_id=None, warehouse_id=None, limit=100, offset=0):
        rows = [
            r
            for key, r in sorted(self.records.items())
            if (product_id is None or r.product_id == product_id)
            and (warehouse_id is None or r.warehouse_id == warehouse_id)
        ]
        return rows[offset : offset + limit]

    async def add_movement(self, movement):
        movement.id = len(self.movements) + 1
        self.movements.append(movement)
        return movement

    async def get_movements(self, stock_record_id, limit=100, offset=0):
        rows = [m for m in reversed(self.movements) if m.stock_record_id == stock_record_id]
        return rows[offset : offset + limit]

    def pieces(self, product_id: str, warehouse_id: str) -> int | None:
        record = self.records.get((product_id, warehouse_id))
        return record.total_pieces if record else None


class InMemoryCatalogStore(ICatalogStore):
    def __init__(self):
        self.products: dict[str, Product] = {}
        self.warehouses: dict[str, Warehouse] = {}
        self.dealers: dict[str, Dealer] = {}

    async def get_product(self, product_id):
        return self.products.get(product_id)

    async def create_product(self, product):
        if product.id in self.products:
            raise AlreadyExistsError("Product", product.id)
        self.products[product.id] = product
        return product

    async def list_products(self, limit=100, offset=0):
        return list(self.products.values())[offset : offset + limit]

    async def get_warehouse(self, warehouse_id):
        return self.warehouses.get(warehouse_id)

    async def create_warehouse(self, warehouse):
        self.warehouses[warehouse.id] = warehouse
        return warehouse

    async def list_warehouses(self):
        return list(self.warehouses.values())

    async def get_dealer(self, dealer_id):
        return self.dealers.get(dealer_id)

    async def create_dealer(self, dealer):
        self.dealers[dealer.id] = dealer
        return dealer

    async def list_dealers(self):
        return list(self.dealers.values())


class InMemoryBillStore(IBillStore):
    def __init__(self):
        self.bills: dict[int, Bill] = {}
        self.fail_next_write = False

    def _check_failure(self):
        if self.fail_next_write:
            self.fail_next_write = False
            raise RuntimeError("disk I/O error")

    async def create(self, bill):
        self._check_failure()
        stored = bill.model_copy(update={"id": len(self.bills) + 1})
        self.bills[stored.id] = stored
        return stored

    async def get(self, bill_id):
        return self.bills.get(bill_id)

    async def update(self, bill, expected_version):
        self._check_failure()
        current = self.bills.get(bill.id)
        if current is None or current.version != expected_version:
            return None
        stored = bill.model_copy(update={"version": expected_version + 1})
        self.bills[bill.id] = stored
        return stored

    async def list_bills(self, limit=100, offset=0):
        return list(self.bills.values())[offset : offset + limit]


class InMemoryPurchaseStore(IPurchaseStore):
    def __init__(self):
        self.purchases: dict[int, PurchaseOrder] = {}

    async def create(self, purchase):
        stored = purchase.model_copy(update={"id": len(self.purchases) + 1})
        self.purchases[stored.id] = stored
        return stored

    async def get(self, purchase_id):
        return self.purchases.get(purchase_id)

    async def update(self, purchase, expected_version):
        current = self.purchases.get(purchase.id)
        if current is None or current.version != expected_version:
            return None
        stored = purchase.model_copy(update={"version": expected_version + 1})
        self.purchases[purchase.id] = stored
        return stored

    async def list_purchases(self, dealer_id=None, limit=100, offset=0):
        rows = [p for p in self.purchases.values() if dealer_id is None or p.dealer_id == dealer_id]
        return rows[offset : offset + limit]

    async def list_for_dealer(self, dealer_id, period_start, period_end):
        return [
            p
            for p in self.purchases.values()
            if p.dealer_id == dealer_id and period_start <= p.purchase_date <= period_end
        ]


class InMemoryCustomerStore(ICustomerStore):
    """Customers keyed by phone; a repeat phone updates the fields it sets."""

    def __init__(self):
        self.customers: dict[str, Customer] = {}
        self._ids = count(1)

    async def upsert(self, customer):
        current = self.customers.get(customer.phone)
        if current is None:
            stored = customer.model_copy(update={"id": next(self._ids)})
        else:
            changes = customer.model_dump(
                include={"name", "shop_name", "address", "gst_number"}, exclude_none=True
            )
            stored = current.model_copy(update=changes)
        self.customers[customer.phone] = stored
        return stored

    async def get(self, customer_id):
        return next((c for c in self.customers.values() if c.id == customer_id), None)

    async def get_by_phone(self, phone):
        return self.customers.get(phone)

    async def search(self, query=None, limit=20):
        needle = (query or "").lower()
        rows = [
            c
            for c in reversed(list(self.customers.values()))
            if needle in c.name.lower() or needle in c.phone or needle in (c.shop_name or "").lower()
        ]
        return rows[:limit]


@pytest.fixture
def stock_store() -> InMemoryStockStore:
    return InMemoryStockStore()


@pytest.fixture
def ledger(stock_store: InMemoryStockStore) -> StockLedger:
    return StockLedger(stock_store, max_retries=3, retry_delay=0)


@pytest.fixture
def catalog(product, other_product, warehouse, other_warehouse, dealer) -> InMemoryCatalogStore:
    store = InMemoryCatalogStore()
    store.products = {product.id: product, other_product.id: other_product}
    store.warehouses = {warehouse.id: warehouse, other_warehouse.id: other_warehouse}
    store.dealers = {dealer.id: dealer}
    return store


@pytest.fixture
def bill_store() -> InMemoryBillStore:
    return InMemoryBillStore()


@pytest.fixture
def purchase_store() -> InMemoryPurchaseStore:
    return InMemoryPurchaseStore()


@pytest.fixture
def customer_store() -> InMemoryCustomerStore:
    return InMemoryCustomerStore()


@pytest.fixture
def engine(
    ledger: StockLedger,
    catalog: InMemoryCatalogStore,
    bill_store: InMemoryBillStore,
    purchase_store: InMemoryPurchaseStore,
) -> TransactionEngine:
    return TransactionEngine(ledger, catalog, bill_store, purchase_store)
