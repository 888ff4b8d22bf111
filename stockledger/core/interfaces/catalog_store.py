"""Abstract interface for catalog storage."""

from abc import ABC, abstractmethod

from stockledger.core.entities.catalog import Dealer, Product, Warehouse


class ICatalogStore(ABC):
    """Interface for product, warehouse and dealer persistence."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        pass

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Raises AlreadyExistsError for a duplicate ID."""
        pass

    @abstractmethod
    async def list_products(self, limit: int = 100, offset: int = 0) -> list[Product]:
        pass

    @abstractmethod
    async def get_warehouse(self, warehouse_id: str) -> Warehouse | None:
        pass

    @abstractmethod
    async def create_warehouse(self, warehouse: Warehouse) -> Warehouse:
        pass

    @abstractmethod
    async def list_warehouses(self) -> list[Warehouse]:
        pass

    @abstractmethod
    async def get_dealer(self, dealer_id: str) -> Dealer | None:
        pass

    @abstractmethod
    async def create_dealer(self, dealer: Dealer) -> Dealer:
        pass

    @abstractmethod
    async def list_dealers(self) -> list[Dealer]:
        pass
