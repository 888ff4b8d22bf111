"""Abstract interface for the customer registry."""

from abc import ABC, abstractmethod

from stockledger.core.entities.customer import Customer


class ICustomerStore(ABC):
    """Interface for customer persistence, keyed by phone number."""

    @abstractmethod
    async def upsert(self, customer: Customer) -> Customer:
        """Insert the customer, or update the row with the same phone.

        Optional fields that are None keep their stored values.
        """
        pass

    @abstractmethod
    async def get(self, customer_id: int) -> Customer | None:
        pass

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Customer | None:
        pass

    @abstractmethod
    async def search(self, query: str | None = None, limit: int = 20) -> list[Customer]:
        """Case-insensitive match on name, shop name or phone; newest first."""
        pass
