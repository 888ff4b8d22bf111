"""Stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_adjust_stock_use_case,
    get_create_stock_use_case,
    get_ledger,
)
from stockledger.application.dto.requests import (
    AdjustStockRequest,
    CreateStockRequest,
    UpdateThresholdsRequest,
)
from stockledger.application.dto.responses import (
    ErrorResponse,
    StockAdjustmentResponse,
    StockListResponse,
    StockMovementResponse,
    StockResponse,
)
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    CreateStockUseCase,
    stock_to_response,
)
from stockledger.core.services import StockLedger

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.post(
    "",
    response_model=StockResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_stock(
    request: CreateStockRequest,
    use_case: CreateStockUseCase = Depends(get_create_stock_use_case),
) -> StockResponse:
    """Open a stock row for a (product, warehouse) pair."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=StockListResponse)
async def list_stock(
    product_id: str | None = None,
    warehouse_id: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: StockLedger = Depends(get_ledger),
) -> StockListResponse:
    """List stock reads, optionally filtered by product and/or warehouse."""
    records = await ledger.list_records(
        product_id=product_id.strip() if product_id else None,
        warehouse_id=warehouse_id.strip() if warehouse_id else None,
        limit=limit,
        offset=offset,
    )
    return StockListResponse(
        records=[stock_to_response(r) for r in records],
        total=len(records),
    )


@router.get("/alerts", response_model=StockListResponse)
async def stock_alerts(
    warehouse_id: str | None = None,
    ledger: StockLedger = Depends(get_ledger),
) -> StockListResponse:
    """Rows that are low or out of stock."""
    records = await ledger.alerts(warehouse_id=warehouse_id.strip() if warehouse_id else None)
    return StockListResponse(
        records=[stock_to_response(r) for r in records],
        total=len(records),
    )


@router.post(
    "/adjust",
    response_model=StockAdjustmentResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    request: AdjustStockRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> StockAdjustmentResponse:
    """Apply a signed stock change in boxes/loose pieces or in pieces."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


# Must be registered before /{product_id}/{warehouse_id}
@router.get(
    "/{record_id}/movements",
    response_model=list[StockMovementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_movements(
    record_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: StockLedger = Depends(get_ledger),
) -> list[StockMovementResponse]:
    """Movement history for a stock row, newest first."""
    movements = await ledger.movements(record_id, limit=limit, offset=offset)
    return [StockMovementResponse.model_validate(m) for m in movements]


@router.get(
    "/{product_id}/{warehouse_id}",
    response_model=StockResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_stock(
    product_id: str,
    warehouse_id: str,
    ledger: StockLedger = Depends(get_ledger),
) -> StockResponse:
    record = await ledger.get(product_id.strip(), warehouse_id.strip())
    return stock_to_response(record)


@router.put(
    "/{product_id}/{warehouse_id}/thresholds",
    response_model=StockResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_thresholds(
    product_id: str,
    warehouse_id: str,
    request: UpdateThresholdsRequest,
    ledger: StockLedger = Depends(get_ledger),
) -> StockResponse:
    """Set or clear the low-stock thresholds of a row."""
    record = await ledger.set_thresholds(
        product_id.strip(),
        warehouse_id.strip(),
        low_stock_boxes=request.low_stock_boxes,
        low_stock_items=request.low_stock_items,
    )
    return stock_to_response(record)


@router.delete(
    "/{product_id}/{warehouse_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_stock(
    product_id: str,
    warehouse_id: str,
    ledger: StockLedger = Depends(get_ledger),
) -> None:
    """Administrative delete of a stock row and its movement history."""
    await ledger.delete(product_id.strip(), warehouse_id.strip())
