"""SQLite implementation of bill storage."""

from datetime import UTC, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.bill import (
    Bill,
    BillLine,
    CustomerInfo,
    DiscountType,
    Payment,
    PaymentMode,
)
from stockledger.core.interfaces.document_store import IBillStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.rows import day, dec, ts

logger = get_logger(__name__)


class SQLiteBillStore(IBillStore):
    """Bills in `bills`, their lines in `bill_lines` keyed by position."""

    async def create(self, bill: Bill) -> Bill:
        now = datetime.now(UTC)
        bill = bill.model_copy(update={"created_at": now, "updated_at": now})
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO bills (
                    bill_number, customer_id, customer_name, customer_phone, customer_address,
                    customer_shop_name, customer_gst_number, bill_date,
                    payment_mode, cash_amount, upi_amount, card_amount,
                    total_items, total_before_tax, total_tax, grand_total,
                    amount_collected, balance_amount, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (*self._bill_columns(bill), bill.created_at.isoformat(), bill.updated_at.isoformat()),
            )
            bill.id = cursor.lastrowid
            await self._insert_lines(conn, bill)

        logger.info("bill_inserted", bill_id=bill.id, lines=len(bill.lines))
        return bill

    async def get(self, bill_id: int) -> Bill | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM bills WHERE id = ?", (bill_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load(conn, row)

    async def update(self, bill: Bill, expected_version: int) -> Bill | None:
        bill = bill.model_copy(
            update={"updated_at": datetime.now(UTC), "version": expected_version + 1}
        )
        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(
                """
                UPDATE bills SET
                    bill_number = ?, customer_id = ?, customer_name = ?, customer_phone = ?,
                    customer_address = ?, customer_shop_name = ?, customer_gst_number = ?,
                    bill_date = ?, payment_mode = ?, cash_amount = ?, upi_amount = ?,
                    card_amount = ?, total_items = ?, total_before_tax = ?, total_tax = ?,
                    grand_total = ?, amount_collected = ?, balance_amount = ?,
                    version = version + 1, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    *self._bill_columns(bill),
                    bill.updated_at.isoformat(),
                    bill.id,
                    expected_version,
                ),
            )
            if cursor.rowcount == 0:
                logger.debug("bill_stale", bill_id=bill.id, expected_version=expected_version)
                return None
            await conn.execute("DELETE FROM bill_lines WHERE bill_id = ?", (bill.id,))
            await self._insert_lines(conn, bill)

        logger.info("bill_replaced", bill_id=bill.id, lines=len(bill.lines))
        return bill

    async def list_bills(self, limit: int = 100, offset: int = 0) -> list[Bill]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM bills ORDER BY id DESC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [await self._load(conn, row) for row in rows]

    @staticmethod
    def _bill_columns(bill: Bill) -> tuple:
        return (
            bill.bill_number,
            bill.customer.customer_id,
            bill.customer.name,
            bill.customer.phone,
            bill.customer.address,
            bill.customer.shop_name,
            bill.customer.gst_number,
            bill.bill_date.isoformat(),
            bill.payment.mode.value,
            str(bill.payment.cash_amount),
            str(bill.payment.upi_amount),
            str(bill.payment.card_amount),
            bill.total_items,
            str(bill.total_before_tax),
            str(bill.total_tax),
            str(bill.grand_total),
            str(bill.amount_collected),
            str(bill.balance_amount),
        )

    @staticmethod
    async def _insert_lines(conn: aiosqlite.Connection, bill: Bill) -> None:
        await conn.executemany(
            """
            INSERT INTO bill_lines (
                bill_id, position, product_id, warehouse_id, product_name,
                selling_price, tax_percent, quantity_boxes, quantity_loose,
                pieces_per_box, discount_type, discount_value, total_pieces,
                unit_price_after_discount, gross_amount, tax_amount,
                amount_before_tax, line_total
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    bill.id,
                    position,
                    line.product_id,
                    line.warehouse_id,
                    line.product_name,
                    str(line.selling_price),
                    str(line.tax_percent),
                    line.quantity_boxes,
                    line.quantity_loose,
                    line.pieces_per_box,
                    line.discount_type.value,
                    str(line.discount_value),
                    line.total_pieces,
                    str(line.unit_price_after_discount),
                    str(line.gross_amount),
                    str(line.tax_amount),
                    str(line.amount_before_tax),
                    str(line.line_total),
                )
                for position, line in enumerate(bill.lines)
            ],
        )

    async def _load(self, conn: aiosqlite.Connection, row: aiosqlite.Row) -> Bill:
        cursor = await conn.execute(
            "SELECT * FROM bill_lines WHERE bill_id = ? ORDER BY position",
            (row["id"],),
        )
        line_rows = await cursor.fetchall()
        return Bill(
            id=row["id"],
            bill_number=row["bill_number"],
            customer=CustomerInfo(
                customer_id=row["customer_id"],
                name=row["customer_name"],
                phone=row["customer_phone"],
                address=row["customer_address"],
                shop_name=row["customer_shop_name"],
                gst_number=row["customer_gst_number"],
            ),
            bill_date=day(row["bill_date"]),
            lines=[self._row_to_line(r) for r in line_rows],
            payment=Payment(
                mode=PaymentMode(row["payment_mode"]),
                cash_amount=dec(row["cash_amount"]),
                upi_amount=dec(row["upi_amount"]),
                card_amount=dec(row["card_amount"]),
            ),
            total_items=row["total_items"],
            total_before_tax=dec(row["total_before_tax"]),
            total_tax=dec(row["total_tax"]),
            grand_total=dec(row["grand_total"]),
            amount_collected=dec(row["amount_collected"]),
            balance_amount=dec(row["balance_amount"]),
            version=row["version"],
            created_at=ts(row["created_at"]),
            updated_at=ts(row["updated_at"]),
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> BillLine:
        return BillLine(
            product_id=row["product_id"],
            warehouse_id=row["warehouse_id"],
            product_name=row["product_name"],
            selling_price=dec(row["selling_price"]),
            tax_percent=dec(row["tax_percent"]),
            quantity_boxes=row["quantity_boxes"],
            quantity_loose=row["quantity_loose"],
            pieces_per_box=row["pieces_per_box"],
            discount_type=DiscountType(row["discount_type"]),
            discount_value=dec(row["discount_value"]),
            total_pieces=row["total_pieces"],
            unit_price_after_discount=dec(row["unit_price_after_discount"]),
            gross_amount=dec(row["gross_amount"]),
            tax_amount=dec(row["tax_amount"]),
            amount_before_tax=dec(row["amount_before_tax"]),
            line_total=dec(row["line_total"]),
        )
