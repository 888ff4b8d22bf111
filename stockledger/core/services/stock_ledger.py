"""
Stock ledger service.

Owns every stock row. Each write is a read-modify-write held under an
in-process lock for the (product, warehouse) pair and committed with an
optimistic version check, so writers in other processes cannot lose
updates either. Version conflicts are retried with tenacity.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.stock import (
    StockMovement,
    StockRecord,
    StockStatus,
    TransactionDelta,
)
from stockledger.core.exceptions import (
    ConcurrentModificationError,
    InsufficientStockError,
    InvalidUnitError,
    NotFoundError,
    StockAlreadyExistsError,
    StockRecordNotFoundError,
)
from stockledger.core.interfaces import IStockStore
from stockledger.core.services.keyed_locks import KeyedLocks
from stockledger.core.services.stock_diff import negate, net_deltas
from stockledger.core.services.unit_converter import UnitConverter

logger = get_logger(__name__)

T = TypeVar("T")

# Page size used when scanning all rows for alerts
ALERT_PAGE_SIZE = 500


class VersionConflict(Exception):
    """The stock row changed between read and conditional write."""


class StockLedger:
    """
    Per-row atomic stock mutations.

    Required interfaces for DI:
    - IStockStore: stock rows and movement history
    """

    def __init__(
        self,
        stock_store: IStockStore,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        default_pieces_per_box: int | None = None,
    ):
        settings = get_settings()
        self._store = stock_store
        self._max_retries = (
            max_retries if max_retries is not None else settings.ledger.max_retries
        )
        self._retry_delay = (
            retry_delay if retry_delay is not None else settings.ledger.retry_delay
        )
        self._default_ppb = (
            default_pieces_per_box
            if default_pieces_per_box is not None
            else settings.ledger.default_pieces_per_box
        )
        if self._max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self._max_retries}")
        if self._default_ppb < 1:
            raise ValueError(
                f"default_pieces_per_box must be at least 1, got {self._default_ppb}"
            )
        self._locks = KeyedLocks()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, product_id: str, warehouse_id: str) -> StockRecord:
        record = await self._store.get(product_id, warehouse_id)
        if record is None:
            raise StockRecordNotFoundError(product_id, warehouse_id)
        return record

    @staticmethod
    def status(record: StockRecord) -> StockStatus:
        """OUT at zero pieces, LOW at or under a configured threshold, else OK."""
        total = record.total_pieces
        if total == 0:
            return StockStatus.OUT
        threshold = record.low_stock_threshold
        if threshold is not None and total <= threshold:
            return StockStatus.LOW
        return StockStatus.OK

    async def list_records(
        self,
        product_id: str | None = None,
        warehouse_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockRecord]:
        return await self._store.list_records(
            product_id=product_id,
            warehouse_id=warehouse_id,
            limit=limit,
            offset=offset,
        )

    async def alerts(self, warehouse_id: str | None = None) -> list[StockRecord]:
        """Rows that are LOW or OUT."""
        flagged: list[StockRecord] = []
        offset = 0
        while True:
            page = await self._store.list_records(
                warehouse_id=warehouse_id, limit=ALERT_PAGE_SIZE, offset=offset
            )
            flagged.extend(r for r in page if self.status(r) != StockStatus.OK)
            if len(page) < ALERT_PAGE_SIZE:
                return flagged
            offset += ALERT_PAGE_SIZE

    async def movements(
        self, stock_record_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        record = await self._store.get_by_id(stock_record_id)
        if record is None:
            raise NotFoundError("Stock record", stock_record_id, code="STOCK_RECORD_NOT_FOUND")
        return await self._store.get_movements(stock_record_id, limit=limit, offset=offset)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self,
        product_id: str,
        warehouse_id: str,
        pieces_per_box: int,
        boxes: int = 0,
        loose: int = 0,
        low_stock_boxes: int | None = None,
        low_stock_items: int | None = None,
    ) -> StockRecord:
        """
        Create the stock row for a pair, folding loose overflow into boxes.

        Raises:
            StockAlreadyExistsError: If the pair already has a row.
            InvalidUnitError: On a bad box size or negative quantity.
        """
        pieces = UnitConverter.to_pieces(boxes, loose, pieces_per_box)
        for field, value in (
            ("low_stock_boxes", low_stock_boxes),
            ("low_stock_items", low_stock_items),
        ):
            if value is not None and value < 0:
                raise InvalidUnitError(field, value)

        async with self._locks.hold((product_id, warehouse_id)):
            if await self._store.get(product_id, warehouse_id) is not None:
                raise StockAlreadyExistsError(product_id, warehouse_id)

            record = StockRecord(
                product_id=product_id,
                warehouse_id=warehouse_id,
                pieces_per_box=pieces_per_box,
                low_stock_boxes=low_stock_boxes,
                low_stock_items=low_stock_items,
            ).with_pieces(pieces)
            stored = await self._store.create(record)
            if pieces:
                await self._record_movement(stored, pieces, "opening")

        logger.info(
            "stock_record_created",
            product_id=product_id,
            warehouse_id=warehouse_id,
            boxes=stored.boxes,
            loose_items=stored.loose_items,
        )
        return stored

    async def apply_delta(
        self,
        product_id: str,
        warehouse_id: str,
        delta_pieces: int,
        pieces_per_box: int | None = None,
        reference: str | None = None,
    ) -> StockRecord:
        """
        Add `delta_pieces` to a row atomically.

        Current pieces are counted with the row's stored box size and the
        result is re-split with `pieces_per_box` when given, bringing the row
        in line with the product.

        Raises:
            InsufficientStockError: If the result would be negative.
            StockRecordNotFoundError: On stock-out from a pair with no row.
            ConcurrentModificationError: If the version check keeps failing.
        """
        if pieces_per_box is not None and pieces_per_box < 1:
            raise InvalidUnitError("pieces_per_box", pieces_per_box)

        async with self._locks.hold((product_id, warehouse_id)):
            return await self._with_retry(
                product_id,
                warehouse_id,
                self._apply_once,
                product_id,
                warehouse_id,
                delta_pieces,
                pieces_per_box,
                reference,
            )

    async def apply_deltas(
        self,
        deltas: Iterable[TransactionDelta],
        reference: str | None = None,
    ) -> list[StockRecord]:
        """
        Apply a set of deltas all-or-nothing.

        Deltas are netted per row, stock-out rows go first, and each row is
        written atomically. When any row fails, the rows already written are
        reverted in reverse order and the original error is raised.
        """
        netted = net_deltas(deltas)
        ordered = sorted(netted, key=lambda d: d.pieces > 0)
        applied: list[TransactionDelta] = []
        results: list[StockRecord] = []

        try:
            for delta in ordered:
                results.append(
                    await self.apply_delta(
                        delta.product_id,
                        delta.warehouse_id,
                        delta.pieces,
                        pieces_per_box=delta.pieces_per_box,
                        reference=reference,
                    )
                )
                applied.append(delta)
        except Exception as e:
            logger.warning(
                "stock_deltas_rolled_back",
                reference=reference,
                applied=len(applied),
                total=len(ordered),
                error=str(e),
            )
            await self.compensate(applied, reference)
            raise

        return results

    async def compensate(
        self, applied: Iterable[TransactionDelta], reference: str | None = None
    ) -> None:
        """Revert deltas that were already applied, newest first."""
        undo_reference = f"{reference}:revert" if reference else "revert"
        for delta in reversed(negate(net_deltas(applied))):
            try:
                await self.apply_delta(
                    delta.product_id,
                    delta.warehouse_id,
                    delta.pieces,
                    pieces_per_box=delta.pieces_per_box,
                    reference=undo_reference,
                )
            except Exception:
                logger.exception(
                    "stock_compensation_failed",
                    product_id=delta.product_id,
                    warehouse_id=delta.warehouse_id,
                    pieces=delta.pieces,
                    reference=undo_reference,
                )

    async def ensure_available(self, deltas: Iterable[TransactionDelta]) -> None:
        """
        Check every stock-out delta against current stock without writing.

        Raises:
            StockRecordNotFoundError: If a stock-out row does not exist.
            InsufficientStockError: If a row holds fewer pieces than requested.
        """
        for delta in net_deltas(deltas):
            if delta.pieces >= 0:
                continue
            record = await self.get(delta.product_id, delta.warehouse_id)
            if record.total_pieces + delta.pieces < 0:
                raise InsufficientStockError(
                    delta.product_id,
                    delta.warehouse_id,
                    available=record.total_pieces,
                    requested=-delta.pieces,
                )

    async def set_thresholds(
        self,
        product_id: str,
        warehouse_id: str,
        low_stock_boxes: int | None,
        low_stock_items: int | None,
    ) -> StockRecord:
        for field, value in (
            ("low_stock_boxes", low_stock_boxes),
            ("low_stock_items", low_stock_items),
        ):
            if value is not None and value < 0:
                raise InvalidUnitError(field, value)

        async with self._locks.hold((product_id, warehouse_id)):
            record = await self._with_retry(
                product_id,
                warehouse_id,
                self._set_thresholds_once,
                product_id,
                warehouse_id,
                low_stock_boxes,
                low_stock_items,
            )

        logger.info(
            "stock_thresholds_updated",
            product_id=product_id,
            warehouse_id=warehouse_id,
            low_stock_boxes=low_stock_boxes,
            low_stock_items=low_stock_items,
        )
        return record

    async def delete(self, product_id: str, warehouse_id: str) -> None:
        async with self._locks.hold((product_id, warehouse_id)):
            deleted = await self._store.delete(product_id, warehouse_id)
        if not deleted:
            raise StockRecordNotFoundError(product_id, warehouse_id)
        logger.info("stock_record_deleted", product_id=product_id, warehouse_id=warehouse_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _apply_once(
        self,
        product_id: str,
        warehouse_id: str,
        delta_pieces: int,
        pieces_per_box: int | None,
        reference: str | None,
    ) -> StockRecord:
        current = await self._store.get(product_id, warehouse_id)

        if current is None:
            if delta_pieces <= 0:
                raise StockRecordNotFoundError(product_id, warehouse_id)
            # First stock-in for the pair
            record = StockRecord(
                product_id=product_id,
                warehouse_id=warehouse_id,
                pieces_per_box=pieces_per_box or self._default_ppb,
            ).with_pieces(delta_pieces)
            try:
                stored = await self._store.create(record)
            except StockAlreadyExistsError as e:
                raise VersionConflict() from e
            before = 0
        else:
            before = current.total_pieces
            after = before + delta_pieces
            if after < 0:
                raise InsufficientStockError(
                    product_id,
                    warehouse_id,
                    available=before,
                    requested=-delta_pieces,
                )
            updated = current.with_pieces(after, pieces_per_box)
            stored = await self._store.update(updated, expected_version=current.version)
            if stored is None:
                raise VersionConflict()

        await self._record_movement(stored, delta_pieces, reference)

        logger.info(
            "stock_delta_applied",
            product_id=product_id,
            warehouse_id=warehouse_id,
            delta=delta_pieces,
            pieces_before=before,
            pieces_after=stored.total_pieces,
            reference=reference,
        )
        return stored

    async def _set_thresholds_once(
        self,
        product_id: str,
        warehouse_id: str,
        low_stock_boxes: int | None,
        low_stock_items: int | None,
    ) -> StockRecord:
        current = await self.get(product_id, warehouse_id)
        updated = current.model_copy(
            update={"low_stock_boxes": low_stock_boxes, "low_stock_items": low_stock_items}
        )
        stored = await self._store.update(updated, expected_version=current.version)
        if stored is None:
            raise VersionConflict()
        return stored

    async def _record_movement(
        self, record: StockRecord, delta_pieces: int, reference: str | None
    ) -> None:
        if record.id is None:
            return
        await self._store.add_movement(
            StockMovement(
                stock_record_id=record.id,
                pieces_delta=delta_pieces,
                boxes_after=record.boxes,
                loose_after=record.loose_items,
                reference=reference,
            )
        )

    async def _with_retry(
        self,
        product_id: str,
        warehouse_id: str,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
    ) -> T:
        retry_decorator = retry(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                min=self._retry_delay,
                max=self._retry_delay * 8,
            ),
            retry=retry_if_exception_type(VersionConflict),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            return await retry_decorator(operation)(*args)
        except VersionConflict as e:
            logger.warning(
                "stock_version_conflict",
                product_id=product_id,
                warehouse_id=warehouse_id,
                attempts=self._max_retries,
            )
            raise ConcurrentModificationError(
                product_id, warehouse_id, self._max_retries
            ) from e

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.debug("stock_write_retry", attempt=retry_state.attempt_number)
