"""Create Stock Use Case: open a stock row for a (product, warehouse) pair."""

from dataclasses import dataclass

from stockledger.application.dto.requests import CreateStockRequest
from stockledger.application.dto.responses import StockResponse
from stockledger.config import get_logger
from stockledger.core.entities import StockRecord
from stockledger.core.exceptions import ProductNotFoundError, WarehouseNotFoundError
from stockledger.core.interfaces import ICatalogStore
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


def stock_to_response(record: StockRecord) -> StockResponse:
    """Stock read with its computed status."""
    return StockResponse(
        id=record.id,  # type: ignore[arg-type]
        product_id=record.product_id,
        warehouse_id=record.warehouse_id,
        boxes=record.boxes,
        loose_items=record.loose_items,
        pieces_per_box=record.pieces_per_box,
        total_pieces=record.total_pieces,
        status=StockLedger.status(record),
        low_stock_boxes=record.low_stock_boxes,
        low_stock_items=record.low_stock_items,
        low_stock_threshold=record.low_stock_threshold,
        version=record.version,
        updated_at=record.updated_at,
    )


@dataclass
class CreateStockResult:
    """Result of opening a stock row."""

    record: StockRecord


class CreateStockUseCase:
    """Create the stock row for a pair; the box size defaults to the product's."""

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

    async def execute(self, request: CreateStockRequest) -> CreateStockResult:
        logger.info(
            "create_stock_started",
            product_id=request.product_id,
            warehouse_id=request.warehouse_id,
        )

        catalog = await self._get_catalog_store()
        product = await catalog.get_product(request.product_id)
        if product is None:
            raise ProductNotFoundError(request.product_id)
        if await catalog.get_warehouse(request.warehouse_id) is None:
            raise WarehouseNotFoundError(request.warehouse_id)

        ledger = await self._get_stock_ledger()
        record = await ledger.create(
            product_id=request.product_id,
            warehouse_id=request.warehouse_id,
            pieces_per_box=request.pieces_per_box or product.pieces_per_box,
            boxes=request.boxes,
            loose=request.loose_items,
            low_stock_boxes=request.low_stock_boxes,
            low_stock_items=request.low_stock_items,
        )
        return CreateStockResult(record=record)

    def to_response(self, result: CreateStockResult) -> StockResponse:
        return stock_to_response(result.record)
