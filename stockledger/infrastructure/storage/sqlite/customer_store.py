"""SQLite implementation of the customer registry."""

from datetime import UTC, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.customer import Customer
from stockledger.core.interfaces.customer_store import ICustomerStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.rows import ts

logger = get_logger(__name__)


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLiteCustomerStore(ICustomerStore):
    """Customers in `customers`, one row per phone number."""

    async def upsert(self, customer: Customer) -> Customer:
        now = datetime.now(UTC).isoformat()
        async with get_transaction() as conn:
            # Optional fields left out keep their stored values
            await conn.execute(
                """
                INSERT INTO customers (
                    name, phone, shop_name, address, gst_number, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (phone) DO UPDATE SET
                    name = excluded.name,
                    shop_name = COALESCE(excluded.shop_name, customers.shop_name),
                    address = COALESCE(excluded.address, customers.address),
                    gst_number = COALESCE(excluded.gst_number, customers.gst_number),
                    updated_at = excluded.updated_at
                """,
                (
                    customer.name,
                    customer.phone,
                    customer.shop_name,
                    customer.address,
                    customer.gst_number,
                    now,
                    now,
                ),
            )
            cursor = await conn.execute(
                "SELECT * FROM customers WHERE phone = ?", (customer.phone,)
            )
            stored = self._row_to_customer(await cursor.fetchone())

        logger.info("customer_saved", customer_id=stored.id, phone=stored.phone)
        return stored

    async def get(self, customer_id: int) -> Customer | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM customers WHERE id = ?", (customer_id,))
            row = await cursor.fetchone()
            return self._row_to_customer(row) if row else None

    async def get_by_phone(self, phone: str) -> Customer | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM customers WHERE phone = ?", (phone,))
            row = await cursor.fetchone()
            return self._row_to_customer(row) if row else None

    async def search(self, query: str | None = None, limit: int = 20) -> list[Customer]:
        query = (query or "").strip()
        async with get_connection() as conn:
            if query:
                pattern = _like_pattern(query)
                cursor = await conn.execute(
                    """
                    SELECT * FROM customers
                    WHERE name LIKE ? ESCAPE '\\'
                       OR shop_name LIKE ? ESCAPE '\\'
                       OR phone LIKE ? ESCAPE '\\'
                    ORDER BY created_at DESC, id DESC
                    LIMIT ?
                    """,
                    (pattern, pattern, pattern, limit),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM customers ORDER BY created_at DESC, id DESC LIMIT ?",
                    (limit,),
                )
            rows = await cursor.fetchall()
            return [self._row_to_customer(row) for row in rows]

    @staticmethod
    def _row_to_customer(row: aiosqlite.Row) -> Customer:
        return Customer(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            shop_name=row["shop_name"],
            address=row["address"],
            gst_number=row["gst_number"],
            created_at=ts(row["created_at"]),
            updated_at=ts(row["updated_at"]),
        )
