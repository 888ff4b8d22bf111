"""Abstract interface for stock record storage."""

from abc import ABC, abstractmethod

from stockledger.core.entities.stock import StockMovement, StockRecord


class IStockStore(ABC):
    """Interface for stock row and stock movement persistence."""

    @abstractmethod
    async def get(self, product_id: str, warehouse_id: str) -> StockRecord | None:
        """Get the stock row for a (product, warehouse) pair."""
        pass

    @abstractmethod
    async def get_by_id(self, record_id: int) -> StockRecord | None:
        """Get stock row by ID."""
        pass

    @abstractmethod
    async def create(self, record: StockRecord) -> StockRecord:
        """
        Insert a new stock row.

        Raises:
            StockAlreadyExistsError: If the pair already has a row.
        """
        pass

    @abstractmethod
    async def update(self, record: StockRecord, expected_version: int) -> StockRecord | None:
        """
        Write a new state if the stored version still equals expected_version.

        Returns the stored record with its version bumped, or None when
        another writer got there first.
        """
        pass

    @abstractmethod
    async def delete(self, product_id: str, warehouse_id: str) -> bool:
        """Delete a stock row. Returns False if none existed."""
        pass

    @abstractmethod
    async def list_records(
        self,
        product_id: str | None = None,
        warehouse_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockRecord]:
        """List stock rows, optionally filtered by product or warehouse."""
        pass

    @abstractmethod
    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Record a stock movement."""
        pass

    @abstractmethod
    async def get_movements(
        self, stock_record_id: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Get movements for a stock row, newest first."""
        pass
