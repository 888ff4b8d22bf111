"""Build Dealer Ledger Use Case: purchases and payments with a running balance."""

from dataclasses import dataclass
from datetime import date

from stockledger.application.dto.responses import (
    DealerLedgerResponse,
    LedgerEntryResponse,
    LedgerSummaryResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities import DealerLedgerReport
from stockledger.core.exceptions import ValidationError
from stockledger.core.services import DealerLedger, month_period

logger = get_logger(__name__)


@dataclass
class DealerLedgerResult:
    report: DealerLedgerReport


class BuildDealerLedgerUseCase:
    """
    Dealer ledger over an explicit period or a YYYY-MM month.

    With neither given the current month is used. An explicit period must
    name both ends.
    """

    def __init__(self, dealer_ledger: DealerLedger | None = None):
        self._dealer_ledger = dealer_ledger

    async def _get_dealer_ledger(self) -> DealerLedger:
        if self._dealer_ledger is None:
            from stockledger.application.services import get_dealer_ledger

            self._dealer_ledger = await get_dealer_ledger()
        return self._dealer_ledger

    async def execute(
        self,
        dealer_id: str,
        period_start: date | None = None,
        period_end: date | None = None,
        month: str | None = None,
    ) -> DealerLedgerResult:
        if period_start is not None or period_end is not None:
            if month:
                raise ValidationError("month", "give a month or a period, not both", value=month)
            if period_start is None or period_end is None:
                raise ValidationError(
                    "period_start" if period_start is None else "period_end",
                    "both period_start and period_end are required",
                )
        else:
            period_start, period_end = month_period(month)

        ledger = await self._get_dealer_ledger()
        report = await ledger.build_ledger(dealer_id, period_start, period_end)
        return DealerLedgerResult(report=report)

    def to_response(self, result: DealerLedgerResult) -> DealerLedgerResponse:
        report = result.report
        return DealerLedgerResponse(
            dealer_id=report.dealer_id,
            period_start=report.period_start,
            period_end=report.period_end,
            entries=[LedgerEntryResponse.model_validate(e) for e in report.entries],
            summary=LedgerSummaryResponse.model_validate(report.summary),
        )
