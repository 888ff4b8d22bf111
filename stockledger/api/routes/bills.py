"""Sales bill endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_bills,
    get_create_bill_use_case,
    get_edit_bill_use_case,
)
from stockledger.application.dto.requests import BillRequest
from stockledger.application.dto.responses import (
    BillListResponse,
    BillResponse,
    ErrorResponse,
)
from stockledger.application.use_cases import CreateBillUseCase, EditBillUseCase
from stockledger.core.exceptions import BillNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteBillStore

router = APIRouter(prefix="/api/bills", tags=["bills"])

_WRITE_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=BillResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
)
async def create_bill(
    request: BillRequest,
    use_case: CreateBillUseCase = Depends(get_create_bill_use_case),
) -> BillResponse:
    """
    Create a bill.

    Prices every line (tax-inclusive), rejects overpayment and takes the
    sold pieces out of stock. Nothing is written when any check fails.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.put("/{bill_id}", response_model=BillResponse, responses=_WRITE_ERRORS)
async def edit_bill(
    bill_id: int,
    request: BillRequest,
    use_case: EditBillUseCase = Depends(get_edit_bill_use_case),
) -> BillResponse:
    """Replace a bill; stock moves by the difference between old and new lines."""
    result = await use_case.execute(bill_id, request)
    return use_case.to_response(result)


@router.get("", response_model=BillListResponse)
async def list_bills(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteBillStore = Depends(get_bills),
) -> BillListResponse:
    bills = await store.list_bills(limit=limit, offset=offset)
    return BillListResponse(
        bills=[BillResponse.model_validate(b) for b in bills],
        total=len(bills),
    )


@router.get("/{bill_id}", response_model=BillResponse, responses={404: {"model": ErrorResponse}})
async def get_bill(
    bill_id: int,
    store: SQLiteBillStore = Depends(get_bills),
) -> BillResponse:
    bill = await store.get(bill_id)
    if bill is None:
        raise BillNotFoundError(bill_id)
    return BillResponse.model_validate(bill)
