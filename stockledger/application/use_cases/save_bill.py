"""Bill use cases: create and edit a priced sale against stock."""

from dataclasses import dataclass
from datetime import date

from stockledger.application.dto.requests import BillRequest
from stockledger.application.dto.responses import BillResponse
from stockledger.config import get_logger
from stockledger.core.entities import Bill, BillLine, CustomerInfo, Payment
from stockledger.core.services import TransactionEngine

logger = get_logger(__name__)


@dataclass
class SaveBillResult:
    """Result of creating or editing a bill."""

    bill: Bill
    created: bool = True


def bill_from_request(request: BillRequest) -> Bill:
    """Unpriced bill draft built from the request."""
    return Bill(
        bill_number=request.bill_number,
        customer=CustomerInfo(**request.customer.model_dump()),
        bill_date=request.bill_date or date.today(),
        lines=[BillLine(**line.model_dump()) for line in request.lines],
        payment=Payment(**request.payment.model_dump()),
    )


class _BillUseCase:
    def __init__(self, engine: TransactionEngine | None = None):
        self._engine = engine

    async def _get_engine(self) -> TransactionEngine:
        if self._engine is None:
            from stockledger.application.services import get_transaction_engine

            self._engine = await get_transaction_engine()
        return self._engine

    def to_response(self, result: SaveBillResult) -> BillResponse:
        return BillResponse.model_validate(result.bill)


class CreateBillUseCase(_BillUseCase):
    """
    Price a bill, take its pieces out of stock and store it.

    Nothing is written when pricing fails (for example an overpaid bill) or
    when any line lacks stock.
    """

    async def execute(self, request: BillRequest) -> SaveBillResult:
        logger.info("create_bill_started", lines=len(request.lines))
        engine = await self._get_engine()
        bill = await engine.create_bill(bill_from_request(request))
        return SaveBillResult(bill=bill, created=True)


class EditBillUseCase(_BillUseCase):
    """Replace a bill's lines and payment, moving stock by the net difference."""

    async def execute(self, bill_id: int, request: BillRequest) -> SaveBillResult:
        logger.info("edit_bill_started", bill_id=bill_id, lines=len(request.lines))
        engine = await self._get_engine()
        bill = await engine.edit_bill(bill_id, bill_from_request(request))
        return SaveBillResult(bill=bill, created=False)
