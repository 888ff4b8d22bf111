"""Purchase use cases: create and edit stock received from a dealer."""

from dataclasses import dataclass
from datetime import date

from stockledger.application.dto.requests import PurchaseRequest
from stockledger.application.dto.responses import PurchaseResponse
from stockledger.config import get_logger
from stockledger.core.entities import PurchaseLine, PurchaseOrder
from stockledger.core.services import TransactionEngine

logger = get_logger(__name__)


@dataclass
class SavePurchaseResult:
    """Result of creating or editing a purchase order."""

    purchase: PurchaseOrder
    created: bool = True


def purchase_from_request(request: PurchaseRequest) -> PurchaseOrder:
    """Unpriced purchase draft; every line lands in the order's warehouse."""
    return PurchaseOrder(
        dealer_id=request.dealer_id,
        warehouse_id=request.warehouse_id,
        invoice_number=request.invoice_number,
        purchase_date=request.purchase_date or date.today(),
        lines=[
            PurchaseLine(warehouse_id=request.warehouse_id, **line.model_dump())
            for line in request.lines
        ],
    )


class _PurchaseUseCase:
    def __init__(self, engine: TransactionEngine | None = None):
        self._engine = engine

    async def _get_engine(self) -> TransactionEngine:
        if self._engine is None:
            from stockledger.application.services import get_transaction_engine

            self._engine = await get_transaction_engine()
        return self._engine

    def to_response(self, result: SavePurchaseResult) -> PurchaseResponse:
        return PurchaseResponse.model_validate(result.purchase)


class CreatePurchaseUseCase(_PurchaseUseCase):
    """Price a purchase order, add its pieces to stock and store it."""

    async def execute(self, request: PurchaseRequest) -> SavePurchaseResult:
        logger.info(
            "create_purchase_started",
            dealer_id=request.dealer_id,
            warehouse_id=request.warehouse_id,
            lines=len(request.lines),
        )
        engine = await self._get_engine()
        purchase = await engine.create_purchase(purchase_from_request(request))
        return SavePurchaseResult(purchase=purchase, created=True)


class EditPurchaseUseCase(_PurchaseUseCase):
    """
    Replace a purchase order's lines.

    Stock moves by the net difference between the stored and the new lines.
    An edit that would take a row below zero (stock already sold) is
    rejected and leaves every row unchanged.
    """

    async def execute(self, purchase_id: int, request: PurchaseRequest) -> SavePurchaseResult:
        logger.info("edit_purchase_started", purchase_id=purchase_id, lines=len(request.lines))
        engine = await self._get_engine()
        purchase = await engine.edit_purchase(purchase_id, purchase_from_request(request))
        return SavePurchaseResult(purchase=purchase, created=False)
