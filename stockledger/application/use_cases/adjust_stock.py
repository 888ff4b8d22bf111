"""Adjust Stock Use Case: signed stock mutation in boxes, loose pieces or pieces."""

from dataclasses import dataclass

from stockledger.application.dto.requests import AdjustStockRequest
from stockledger.application.dto.responses import StockAdjustmentResponse
from stockledger.application.use_cases.create_stock import stock_to_response
from stockledger.config import get_logger
from stockledger.core.entities import StockRecord
from stockledger.core.exceptions import (
    ProductNotFoundError,
    StockRecordNotFoundError,
    ValidationError,
    WarehouseNotFoundError,
)
from stockledger.core.interfaces import ICatalogStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class AdjustStockResult:
    """Result of a stock adjustment."""

    record: StockRecord
    pieces_delta: int
    created: bool = False  # True if the adjustment opened the row


class AdjustStockUseCase:
    """
    Apply a manual stock correction through the ledger.

    Box and loose deltas are converted to pieces with the request's
    pieces_per_box, falling back to the product's.
    """

    def __init__(
        self,
        stock_ledger: StockLedger | None = None,
        catalog_store: ICatalogStore | None = None,
    ):
        self._stock_ledger = stock_ledger
        self._catalog_store = catalog_store

    async def _get_stock_ledger(self) -> StockLedger:
        if self._stock_ledger is None:
            from stockledger.application.services import get_stock_ledger

            self._stock_ledger = await get_stock_ledger()
        return self._stock_ledger

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from stockledger.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def execute(self, request: AdjustStockRequest) -> AdjustStockResult:
        catalog = await self._get_catalog_store()
        product = await catalog.get_product(request.product_id)
        if product is None:
            raise ProductNotFoundError(request.product_id)
        if await catalog.get_warehouse(request.warehouse_id) is None:
            raise WarehouseNotFoundError(request.warehouse_id)

        pieces_per_box = request.pieces_per_box or product.pieces_per_box
        if request.pieces_delta is not None:
            pieces = request.pieces_delta
        else:
            pieces = (request.boxes_delta or 0) * pieces_per_box + (request.loose_delta or 0)
        if pieces == 0:
            raise ValidationError("pieces_delta", "adjustment must change stock", value=0)

        logger.info(
            "adjust_stock_started",
            product_id=request.product_id,
            warehouse_id=request.warehouse_id,
            pieces=pieces,
        )

        ledger = await self._get_stock_ledger()
        try:
            await ledger.get(request.product_id, request.warehouse_id)
            created = False
        except StockRecordNotFoundError:
            created = pieces > 0

        record = await ledger.apply_delta(
            request.product_id,
            request.warehouse_id,
            pieces,
            pieces_per_box=pieces_per_box,
            reference=request.reference or "adjustment",
        )
        return AdjustStockResult(record=record, pieces_delta=pieces, created=created)

    def to_response(self, result: AdjustStockResult) -> StockAdjustmentResponse:
        return StockAdjustmentResponse(
            stock=stock_to_response(result.record),
            pieces_delta=result.pieces_delta,
            created=result.created,
        )
