"""Dealer payment use cases: record and update money paid to a dealer."""

from dataclasses import dataclass
from datetime import UTC, datetime

from stockledger.application.dto.requests import (
    DealerPaymentRequest,
    UpdateDealerPaymentRequest,
)
from stockledger.application.dto.responses import DealerPaymentResponse
from stockledger.config import get_logger
from stockledger.core.entities import DealerPayment
from stockledger.core.exceptions import (
    DealerNotFoundError,
    DealerPaymentNotFoundError,
    ValidationError,
)
from stockledger.core.interfaces import ICatalogStore, IDealerPaymentStore

logger = get_logger(__name__)

# Fields a payment update may change
UPDATABLE_FIELDS = ("amount", "payment_mode", "payment_date", "note")


@dataclass
class DealerPaymentResult:
    payment: DealerPayment


class _DealerPaymentUseCase:
    def __init__(
        self,
        payment_store: IDealerPaymentStore | None = None,
        catalog_store: ICatalogStore | None = None,
    ):
        self._payment_store = payment_store
        self._catalog_store = catalog_store

    async def _get_payment_store(self) -> IDealerPaymentStore:
        if self._payment_store is None:
            from stockledger.infrastructure.storage.sqlite import get_dealer_payment_store

            self._payment_store = await get_dealer_payment_store()
        return self._payment_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from stockledger.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    def to_response(self, result: DealerPaymentResult) -> DealerPaymentResponse:
        return DealerPaymentResponse.model_validate(result.payment)


class RecordDealerPaymentUseCase(_DealerPaymentUseCase):
    """Record a payment to a dealer. Stock is never touched."""

    async def execute(self, dealer_id: str, request: DealerPaymentRequest) -> DealerPaymentResult:
        catalog = await self._get_catalog_store()
        if await catalog.get_dealer(dealer_id) is None:
            raise DealerNotFoundError(dealer_id)

        store = await self._get_payment_store()
        payment = await store.create(
            DealerPayment(
                dealer_id=dealer_id,
                amount=request.amount,
                payment_mode=request.payment_mode,
                payment_date=request.payment_date,
                note=request.note,
            )
        )

        logger.info(
            "dealer_payment_recorded",
            payment_id=payment.id,
            dealer_id=dealer_id,
            amount=str(payment.amount),
            mode=payment.payment_mode.value,
        )
        return DealerPaymentResult(payment=payment)


class UpdateDealerPaymentUseCase(_DealerPaymentUseCase):
    """Partial update of a dealer payment; only fields sent are changed."""

    async def execute(
        self, payment_id: int, request: UpdateDealerPaymentRequest
    ) -> DealerPaymentResult:
        updates = {
            field: getattr(request, field)
            for field in UPDATABLE_FIELDS
            if field in request.model_fields_set
        }
        # amount, mode and date cannot be cleared; note can
        for field in ("amount", "payment_mode", "payment_date"):
            if field in updates and updates[field] is None:
                raise ValidationError(field, "cannot be null")
        if not updates:
            raise ValidationError("payment", "No valid fields to update")

        store = await self._get_payment_store()
        existing = await store.get(payment_id)
        if existing is None:
            raise DealerPaymentNotFoundError(payment_id)

        # Re-validate so the amount and note rules apply to the merged payment
        merged = DealerPayment.model_validate(
            {
                **existing.model_dump(),
                **updates,
                "updated_at": datetime.now(UTC),
            }
        )
        payment = await store.update(merged)

        logger.info(
            "dealer_payment_updated",
            payment_id=payment_id,
            fields=sorted(updates),
        )
        return DealerPaymentResult(payment=payment)
