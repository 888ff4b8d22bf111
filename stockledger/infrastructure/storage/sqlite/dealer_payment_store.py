"""SQLite implementation of dealer payment storage."""

from datetime import UTC, date, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.dealer import DealerPayment, DealerPaymentMode
from stockledger.core.interfaces.document_store import IDealerPaymentStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.rows import day, dec, ts

logger = get_logger(__name__)


class SQLiteDealerPaymentStore(IDealerPaymentStore):
    """SQLite implementation of dealer payment storage."""

    async def create(self, payment: DealerPayment) -> DealerPayment:
        now = datetime.now(UTC)
        payment.created_at = now
        payment.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO dealer_payments (
                    dealer_id, amount, payment_mode, payment_date, note,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    payment.dealer_id,
                    str(payment.amount),
                    payment.payment_mode.value,
                    payment.payment_date.isoformat(),
                    payment.note,
                    payment.created_at.isoformat(),
                    payment.updated_at.isoformat(),
                ),
            )
            payment.id = cursor.lastrowid
            logger.info(
                "dealer_payment_inserted",
                payment_id=payment.id,
                dealer_id=payment.dealer_id,
            )
            return payment

    async def get(self, payment_id: int) -> DealerPayment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM dealer_payments WHERE id = ?", (payment_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_payment(row) if row else None

    async def update(self, payment: DealerPayment) -> DealerPayment:
        payment.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE dealer_payments SET
                    amount = ?,
                    payment_mode = ?,
                    payment_date = ?,
                    note = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    str(payment.amount),
                    payment.payment_mode.value,
                    payment.payment_date.isoformat(),
                    payment.note,
                    payment.updated_at.isoformat(),
                    payment.id,
                ),
            )
            return payment

    async def list_for_dealer(
        self, dealer_id: str, period_start: date, period_end: date
    ) -> list[DealerPayment]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM dealer_payments
                WHERE dealer_id = ? AND payment_date BETWEEN ? AND ?
                ORDER BY payment_date, created_at, id
                """,
                (dealer_id, period_start.isoformat(), period_end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_payment(row) for row in rows]

    @staticmethod
    def _row_to_payment(row: aiosqlite.Row) -> DealerPayment:
        return DealerPayment(
            id=row["id"],
            dealer_id=row["dealer_id"],
            amount=dec(row["amount"]),
            payment_mode=DealerPaymentMode(row["payment_mode"]),
            payment_date=day(row["payment_date"]),
            note=row["note"],
            created_at=ts(row["created_at"]),
            updated_at=ts(row["updated_at"]),
        )
