"""SQLite implementation of purchase order storage."""

from datetime import UTC, date, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.purchase import PurchaseLine, PurchaseOrder
from stockledger.core.interfaces.document_store import IPurchaseStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.rows import day, dec, ts

logger = get_logger(__name__)


class SQLitePurchaseStore(IPurchaseStore):
    """Purchase orders in `purchases`, their lines in `purchase_lines`."""

    async def create(self, purchase: PurchaseOrder) -> PurchaseOrder:
        now = datetime.now(UTC)
        purchase = purchase.model_copy(update={"created_at": now, "updated_at": now})
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO purchases (
                    dealer_id, warehouse_id, invoice_number, purchase_date,
                    sub_total, tax_total, grand_total, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    *self._purchase_columns(purchase),
                    purchase.created_at.isoformat(),
                    purchase.updated_at.isoformat(),
                ),
            )
            purchase.id = cursor.lastrowid
            await self._insert_lines(conn, purchase)

        logger.info("purchase_inserted", purchase_id=purchase.id, lines=len(purchase.lines))
        return purchase

    async def get(self, purchase_id: int) -> PurchaseOrder | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM purchases WHERE id = ?", (purchase_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load(conn, row)

    async def update(
        self, purchase: PurchaseOrder, expected_version: int
    ) -> PurchaseOrder | None:
        purchase = purchase.model_copy(
            update={"updated_at": datetime.now(UTC), "version": expected_version + 1}
        )
        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(
                """
                UPDATE purchases SET
                    dealer_id = ?, warehouse_id = ?, invoice_number = ?,
                    purchase_date = ?, sub_total = ?, tax_total = ?, grand_total = ?,
                    version = version + 1, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    *self._purchase_columns(purchase),
                    purchase.updated_at.isoformat(),
                    purchase.id,
                    expected_version,
                ),
            )
            if cursor.rowcount == 0:
                logger.debug(
                    "purchase_stale", purchase_id=purchase.id, expected_version=expected_version
                )
                return None
            await conn.execute("DELETE FROM purchase_lines WHERE purchase_id = ?", (purchase.id,))
            await self._insert_lines(conn, purchase)

        logger.info("purchase_replaced", purchase_id=purchase.id, lines=len(purchase.lines))
        return purchase

    async def list_purchases(
        self, dealer_id: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[PurchaseOrder]:
        async with get_connection() as conn:
            if dealer_id:
                cursor = await conn.execute(
                    """
                    SELECT * FROM purchases WHERE dealer_id = ?
                    ORDER BY purchase_date DESC, id DESC LIMIT ? OFFSET ?
                    """,
                    (dealer_id, limit, offset),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM purchases ORDER BY purchase_date DESC, id DESC LIMIT ? OFFSET ?",
                    (limit, offset),
                )
            rows = await cursor.fetchall()
            return [await self._load(conn, row) for row in rows]

    async def list_for_dealer(
        self, dealer_id: str, period_start: date, period_end: date
    ) -> list[PurchaseOrder]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM purchases
                WHERE dealer_id = ? AND purchase_date BETWEEN ? AND ?
                ORDER BY purchase_date, created_at, id
                """,
                (dealer_id, period_start.isoformat(), period_end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [await self._load(conn, row) for row in rows]

    @staticmethod
    def _purchase_columns(purchase: PurchaseOrder) -> tuple:
        return (
            purchase.dealer_id,
            purchase.warehouse_id,
            purchase.invoice_number,
            purchase.purchase_date.isoformat(),
            str(purchase.sub_total),
            str(purchase.tax_total),
            str(purchase.grand_total),
        )

    @staticmethod
    async def _insert_lines(conn: aiosqlite.Connection, purchase: PurchaseOrder) -> None:
        await conn.executemany(
            """
            INSERT INTO purchase_lines (
                purchase_id, position, product_id, warehouse_id, product_name,
                boxes, loose_items, pieces_per_box, purchase_price,
                discount_percent, tax_percent, total_qty, gross_amount,
                discount_amount, taxable_amount, tax_amount, total_amount
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    purchase.id,
                    position,
                    line.product_id,
                    line.warehouse_id,
                    line.product_name,
                    line.boxes,
                    line.loose_items,
                    line.pieces_per_box,
                    str(line.purchase_price),
                    str(line.discount_percent),
                    str(line.tax_percent),
                    line.total_qty,
                    str(line.gross_amount),
                    str(line.discount_amount),
                    str(line.taxable_amount),
                    str(line.tax_amount),
                    str(line.total_amount),
                )
                for position, line in enumerate(purchase.lines)
            ],
        )

    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> PurchaseOrder:
        cursor = await conn.execute(
            "SELECT * FROM purchase_lines WHERE purchase_id = ? ORDER BY position",
            (row["id"],),
        )
        line_rows = await cursor.fetchall()
        return PurchaseOrder(
            id=row["id"],
            dealer_id=row["dealer_id"],
            warehouse_id=row["warehouse_id"],
            invoice_number=row["invoice_number"],
            purchase_date=day(row["purchase_date"]),
            lines=[self._row_to_line(r) for r in line_rows],
            sub_total=dec(row["sub_total"]),
            tax_total=dec(row["tax_total"]),
            grand_total=dec(row["grand_total"]),
            version=row["version"],
            created_at=ts(row["created_at"]),
            updated_at=ts(row["updated_at"]),
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> PurchaseLine:
        return PurchaseLine(
            product_id=row["product_id"],
            warehouse_id=row["warehouse_id"],
            product_name=row["product_name"],
            boxes=row["boxes"],
            loose_items=row["loose_items"],
            pieces_per_box=row["pieces_per_box"],
            purchase_price=dec(row["purchase_price"]),
            discount_percent=dec(row["discount_percent"]),
            tax_percent=dec(row["tax_percent"]),
            total_qty=row["total_qty"],
            gross_amount=dec(row["gross_amount"]),
            discount_amount=dec(row["discount_amount"]),
            taxable_amount=dec(row["taxable_amount"]),
            tax_amount=dec(row["tax_amount"]),
            total_amount=dec(row["total_amount"]),
        )
