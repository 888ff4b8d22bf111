"""Purchase order endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_create_purchase_use_case,
    get_edit_purchase_use_case,
    get_purchases,
)
from stockledger.application.dto.requests import PurchaseRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    PurchaseListResponse,
    PurchaseResponse,
)
from stockledger.application.use_cases import CreatePurchaseUseCase, EditPurchaseUseCase
from stockledger.core.exceptions import PurchaseNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLitePurchaseStore

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.post(
    "",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def create_purchase(
    request: PurchaseRequest,
    use_case: CreatePurchaseUseCase = Depends(get_create_purchase_use_case),
) -> PurchaseResponse:
    """Receive a dealer's purchase order into a warehouse."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.put(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def edit_purchase(
    purchase_id: int,
    request: PurchaseRequest,
    use_case: EditPurchaseUseCase = Depends(get_edit_purchase_use_case),
) -> PurchaseResponse:
    """
    Replace a purchase order.

    Rejected with 409 when stock already sold from the order would go
    negative; no row changes in that case.
    """
    result = await use_case.execute(purchase_id, request)
    return use_case.to_response(result)


@router.get("", response_model=PurchaseListResponse)
async def list_purchases(
    dealer_id: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLitePurchaseStore = Depends(get_purchases),
) -> PurchaseListResponse:
    purchases = await store.list_purchases(
        dealer_id=dealer_id.strip() if dealer_id else None,
        limit=limit,
        offset=offset,
    )
    return PurchaseListResponse(
        purchases=[PurchaseResponse.model_validate(p) for p in purchases],
        total=len(purchases),
    )


@router.get(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase(
    purchase_id: int,
    store: SQLitePurchaseStore = Depends(get_purchases),
) -> PurchaseResponse:
    purchase = await store.get(purchase_id)
    if purchase is None:
        raise PurchaseNotFoundError(purchase_id)
    return PurchaseResponse.model_validate(purchase)
