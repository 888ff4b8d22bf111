"""SQLite implementation of stock record storage."""

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.stock import StockMovement, StockRecord
from stockledger.core.exceptions import StockAlreadyExistsError
from stockledger.core.interfaces.stock_store import IStockStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.rows import ts

logger = get_logger(__name__)


class SQLiteStockStore(IStockStore):
    """SQLite implementation of stock row and stock movement storage."""

    async def get(self, product_id: str, warehouse_id: str) -> StockRecord | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_records WHERE product_id = ? AND warehouse_id = ?",
                (product_id, warehouse_id),
            )
            row = await cursor.fetchone()
            return self._row_to_record(row) if row else None

    async def get_by_id(self, record_id: int) -> StockRecord | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_records WHERE id = ?", (record_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_record(row) if row else None

    async def create(self, record: StockRecord) -> StockRecord:
        try:
            async with get_transaction(immediate=True) as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO stock_records (
                        product_id, warehouse_id, boxes, loose_items, pieces_per_box,
                        total_pieces, low_stock_boxes, low_stock_items, version,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.product_id,
                        record.warehouse_id,
                        record.boxes,
                        record.loose_items,
                        record.pieces_per_box,
                        record.total_pieces,
                        record.low_stock_boxes,
                        record.low_stock_items,
                        record.version,
                        record.created_at.isoformat(),
                        record.updated_at.isoformat(),
                    ),
                )
                record_id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise StockAlreadyExistsError(record.product_id, record.warehouse_id) from e

        logger.info(
            "stock_record_inserted",
            record_id=record_id,
            product_id=record.product_id,
            warehouse_id=record.warehouse_id,
        )
        return record.model_copy(update={"id": record_id})

    async def update(self, record: StockRecord, expected_version: int) -> StockRecord | None:
        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(
                """
                UPDATE stock_records SET
                    boxes = ?,
                    loose_items = ?,
                    pieces_per_box = ?,
                    total_pieces = ?,
                    low_stock_boxes = ?,
                    low_stock_items = ?,
                    version = version + 1,
                    updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    record.boxes,
                    record.loose_items,
                    record.pieces_per_box,
                    record.total_pieces,
                    record.low_stock_boxes,
                    record.low_stock_items,
                    record.updated_at.isoformat(),
                    record.id,
                    expected_version,
                ),
            )
            if cursor.rowcount == 0:
                logger.debug(
                    "stock_record_stale",
                    record_id=record.id,
                    expected_version=expected_version,
                )
                return None
        return record.model_copy(update={"version": expected_version + 1})

    async def delete(self, product_id: str, warehouse_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM stock_records WHERE product_id = ? AND warehouse_id = ?",
                (product_id, warehouse_id),
            )
            return cursor.rowcount > 0

    async def list_records(
        self,
        product_id: str | None = None,
        warehouse_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockRecord]:
        clauses: list[str] = []
        params: list = []
        if product_id:
            clauses.append("product_id = ?")
            params.append(product_id)
        if warehouse_id:
            clauses.append("warehouse_id = ?")
            params.append(warehouse_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_records
                {where}
                ORDER BY product_id, warehouse_id
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    stock_record_id, pieces_delta, boxes_after, loose_after,
                    reference, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.stock_record_id,
                    movement.pieces_delta,
                    movement.boxes_after,
                    movement.loose_after,
                    movement.reference,
                    movement.created_at.isoformat(),
                ),
            )
            movement.id = cursor.lastrowid
        return movement

    async def get_movements(
        self, stock_record_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE stock_record_id = ?
                ORDER BY id DESC
                LIMIT ? OFFSET ?
                """,
                (stock_record_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> StockRecord:
        return StockRecord(
            id=row["id"],
            product_id=row["product_id"],
            warehouse_id=row["warehouse_id"],
            boxes=row["boxes"],
            loose_items=row["loose_items"],
            pieces_per_box=row["pieces_per_box"],
            low_stock_boxes=row["low_stock_boxes"],
            low_stock_items=row["low_stock_items"],
            version=row["version"],
            created_at=ts(row["created_at"]),
            updated_at=ts(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            stock_record_id=row["stock_record_id"],
            pieces_delta=row["pieces_delta"],
            boxes_after=row["boxes_after"],
            loose_after=row["loose_after"],
            reference=row["reference"],
            created_at=ts(row["created_at"]),
        )
