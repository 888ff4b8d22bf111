"""SQLite implementation of catalog storage."""

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.catalog import Dealer, Product, Warehouse
from stockledger.core.exceptions import AlreadyExistsError
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.rows import dec

logger = get_logger(__name__)


class SQLiteCatalogStore(ICatalogStore):
    """Products, warehouses and dealers keyed by their string IDs."""

    # Products

    async def get_product(self, product_id: str) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def create_product(self, product: Product) -> Product:
        await self._insert(
            "Product",
            product.id,
            """
            INSERT INTO products (
                id, name, sku, pieces_per_box, purchase_price, selling_price,
                tax_percent, hsn_code
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                product.id,
                product.name,
                product.sku,
                product.pieces_per_box,
                str(product.purchase_price),
                str(product.selling_price),
                str(product.tax_percent),
                product.hsn_code,
            ),
        )
        return product

    async def list_products(self, limit: int = 100, offset: int = 0) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products ORDER BY name LIMIT ? OFFSET ?", (limit, offset)
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    # Warehouses

    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM warehouses WHERE id = ?", (warehouse_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Warehouse(id=row["id"], name=row["name"], location=row["location"])

    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        await self._insert(
            "Warehouse",
            warehouse.id,
            "INSERT INTO warehouses (id, name, location) VALUES (?, ?, ?)",
            (warehouse.id, warehouse.name, warehouse.location),
        )
        return warehouse

    async def list_warehouses(self) -> list[Warehouse]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM warehouses ORDER BY name")
            rows = await cursor.fetchall()
            return [
                Warehouse(id=row["id"], name=row["name"], location=row["location"])
                for row in rows
            ]

    # Dealers

    async def get_dealer(self, dealer_id: str) -> Dealer | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM dealers WHERE id = ?", (dealer_id,))
            row = await cursor.fetchone()
            return self._row_to_dealer(row) if row else None

    async def create_dealer(self, dealer: Dealer) -> Dealer:
        await self._insert(
            "Dealer",
            dealer.id,
            "INSERT INTO dealers (id, name, phone, address, gstin) VALUES (?, ?, ?, ?, ?)",
            (dealer.id, dealer.name, dealer.phone, dealer.address, dealer.gstin),
        )
        return dealer

    async def list_dealers(self) -> list[Dealer]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM dealers ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_dealer(row) for row in rows]

    async def _insert(self, entity: str, key: str, sql: str, params: tuple) -> None:
        try:
            async with get_transaction() as conn:
                await conn.execute(sql, params)
        except aiosqlite.IntegrityError as e:
            raise AlreadyExistsError(entity, key) from e
        logger.info("catalog_entry_created", entity=entity.lower(), key=key)

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            sku=row["sku"],
            pieces_per_box=row["pieces_per_box"],
            purchase_price=dec(row["purchase_price"]),
            selling_price=dec(row["selling_price"]),
            tax_percent=dec(row["tax_percent"]),
            hsn_code=row["hsn_code"],
        )

    @staticmethod
    def _row_to_dealer(row: aiosqlite.Row) -> Dealer:
        return Dealer(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            address=row["address"],
            gstin=row["gstin"],
        )
