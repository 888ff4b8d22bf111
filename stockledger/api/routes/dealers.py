"""Dealer payment and ledger endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status

from stockledger.api.dependencies import (
    get_build_dealer_ledger_use_case,
    get_record_dealer_payment_use_case,
    get_update_dealer_payment_use_case,
)
from stockledger.application.dto.requests import (
    DealerPaymentRequest,
    UpdateDealerPaymentRequest,
)
from stockledger.application.dto.responses import (
    DealerLedgerResponse,
    DealerPaymentResponse,
    ErrorResponse,
)
from stockledger.application.use_cases import (
    BuildDealerLedgerUseCase,
    RecordDealerPaymentUseCase,
    UpdateDealerPaymentUseCase,
)

router = APIRouter(prefix="/api", tags=["dealers"])


@router.post(
    "/dealers/{dealer_id}/payments",
    response_model=DealerPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def record_payment(
    dealer_id: str,
    request: DealerPaymentRequest,
    use_case: RecordDealerPaymentUseCase = Depends(get_record_dealer_payment_use_case),
) -> DealerPaymentResponse:
    """Record money paid to a dealer."""
    result = await use_case.execute(dealer_id.strip(), request)
    return use_case.to_response(result)


@router.put(
    "/dealer-payments/{payment_id}",
    response_model=DealerPaymentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_payment(
    payment_id: int,
    request: UpdateDealerPaymentRequest,
    use_case: UpdateDealerPaymentUseCase = Depends(get_update_dealer_payment_use_case),
) -> DealerPaymentResponse:
    """Update some fields of a dealer payment."""
    result = await use_case.execute(payment_id, request)
    return use_case.to_response(result)


@router.get(
    "/dealers/{dealer_id}/ledger",
    response_model=DealerLedgerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def dealer_ledger(
    dealer_id: str,
    period_start: date | None = None,
    period_end: date | None = None,
    month: str | None = None,
    use_case: BuildDealerLedgerUseCase = Depends(get_build_dealer_ledger_use_case),
) -> DealerLedgerResponse:
    """
    Purchases (debits) and payments (credits) with a running balance.

    Pass period_start and period_end, or month=YYYY-MM. Defaults to the
    current month.
    """
    result = await use_case.execute(
        dealer_id.strip(),
        period_start=period_start,
        period_end=period_end,
        month=month,
    )
    return use_case.to_response(result)
