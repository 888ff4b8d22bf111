"""Abstract interfaces for bill, purchase and dealer payment storage."""

from abc import ABC, abstractmethod
from datetime import date

from stockledger.core.entities.bill import Bill
from stockledger.core.entities.dealer import DealerPayment
from stockledger.core.entities.purchase import PurchaseOrder


class IBillStore(ABC):
    """Interface for bill persistence."""

    @abstractmethod
    async def create(self, bill: Bill) -> Bill:
        """Insert a bill with its lines; returns it with an ID."""
        pass

    @abstractmethod
    async def get(self, bill_id: int) -> Bill | None:
        pass

    @abstractmethod
    async def update(self, bill: Bill, expected_version: int) -> Bill | None:
        """
        Replace a bill and all of its lines if its version still matches.

        Returns the stored bill with the bumped version, or None when
        another writer got there first.
        """
        pass

    @abstractmethod
    async def list_bills(self, limit: int = 100, offset: int = 0) -> list[Bill]:
        """List bills, newest first."""
        pass


class IPurchaseStore(ABC):
    """Interface for purchase order persistence."""

    @abstractmethod
    async def create(self, purchase: PurchaseOrder) -> PurchaseOrder:
        pass

    @abstractmethod
    async def get(self, purchase_id: int) -> PurchaseOrder | None:
        pass

    @abstractmethod
    async def update(
        self, purchase: PurchaseOrder, expected_version: int
    ) -> PurchaseOrder | None:
        """Replace a purchase order and its lines; None on a version mismatch."""
        pass

    @abstractmethod
    async def list_purchases(
        self, dealer_id: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[PurchaseOrder]:
        pass

    @abstractmethod
    async def list_for_dealer(
        self, dealer_id: str, period_start: date, period_end: date
    ) -> list[PurchaseOrder]:
        """Purchases for a dealer dated within [period_start, period_end]."""
        pass


class IDealerPaymentStore(ABC):
    """Interface for dealer payment persistence."""

    @abstractmethod
    async def create(self, payment: DealerPayment) -> DealerPayment:
        pass

    @abstractmethod
    async def get(self, payment_id: int) -> DealerPayment | None:
        pass

    @abstractmethod
    async def update(self, payment: DealerPayment) -> DealerPayment:
        pass

    @abstractmethod
    async def list_for_dealer(
        self, dealer_id: str, period_start: date, period_end: date
    ) -> list[DealerPayment]:
        """Payments to a dealer dated within [period_start, period_end]."""
        pass
