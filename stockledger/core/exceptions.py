"""
Domain exceptions for the stock ledger.

Every rejected operation raises one of these; none of them is fatal to the
process. The API layer maps each class to an HTTP status.
"""

from typing import Any


class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(StockLedgerError):
    """A referenced record does not exist."""

    def __init__(self, entity: str, key: Any, code: str | None = None):
        super().__init__(
            f"{entity} not found: {key}",
            code=code or "NOT_FOUND",
            details={"entity": entity, "key": str(key)},
        )


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__("Product", product_id, code="PRODUCT_NOT_FOUND")
        self.details["product_id"] = product_id


class WarehouseNotFoundError(NotFoundError):
    def __init__(self, warehouse_id: str):
        super().__init__("Warehouse", warehouse_id, code="WAREHOUSE_NOT_FOUND")
        self.details["warehouse_id"] = warehouse_id


class DealerNotFoundError(NotFoundError):
    def __init__(self, dealer_id: str):
        super().__init__("Dealer", dealer_id, code="DEALER_NOT_FOUND")
        self.details["dealer_id"] = dealer_id


class StockRecordNotFoundError(NotFoundError):
    """No stock row for a (product, warehouse) pair."""

    def __init__(self, product_id: str, warehouse_id: str):
        super().__init__(
            "Stock record",
            f"{product_id}@{warehouse_id}",
            code="STOCK_RECORD_NOT_FOUND",
        )
        self.details.update({"product_id": product_id, "warehouse_id": warehouse_id})


class BillNotFoundError(NotFoundError):
    def __init__(self, bill_id: int):
        super().__init__("Bill", bill_id, code="BILL_NOT_FOUND")
        self.details["bill_id"] = bill_id


class PurchaseNotFoundError(NotFoundError):
    def __init__(self, purchase_id: int):
        super().__init__("Purchase", purchase_id, code="PURCHASE_NOT_FOUND")
        self.details["purchase_id"] = purchase_id


class DealerPaymentNotFoundError(NotFoundError):
    def __init__(self, payment_id: int):
        super().__init__("Dealer payment", payment_id, code="DEALER_PAYMENT_NOT_FOUND")
        self.details["payment_id"] = payment_id


# Uniqueness Exceptions
class AlreadyExistsError(StockLedgerError):
    """A record with the same identity already exists."""

    def __init__(self, entity: str, key: Any, code: str | None = None):
        super().__init__(
            f"{entity} already exists: {key}",
            code=code or "ALREADY_EXISTS",
            details={"entity": entity, "key": str(key)},
        )


class StockAlreadyExistsError(AlreadyExistsError):
    """Duplicate stock row for the same (product, warehouse) pair."""

    def __init__(self, product_id: str, warehouse_id: str):
        super().__init__(
            "Stock record",
            f"{product_id}@{warehouse_id}",
            code="STOCK_ALREADY_EXISTS",
        )
        self.details.update({"product_id": product_id, "warehouse_id": warehouse_id})


# Stock Exceptions
class InsufficientStockError(StockLedgerError):
    """A delta would drive a stock row below zero pieces."""

    def __init__(
        self,
        product_id: str,
        warehouse_id: str,
        available: int,
        requested: int,
    ):
        super().__init__(
            f"Insufficient stock for {product_id} in {warehouse_id}: "
            f"available {available}, requested {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "warehouse_id": warehouse_id,
                "available": available,
                "requested": requested,
            },
        )


class ConcurrentModificationError(StockLedgerError):
    """Optimistic version check kept failing on a stock row."""

    def __init__(self, product_id: str, warehouse_id: str, attempts: int):
        super().__init__(
            f"Stock record {product_id}@{warehouse_id} was modified concurrently "
            f"({attempts} attempts)",
            code="CONCURRENT_MODIFICATION",
            details={
                "product_id": product_id,
                "warehouse_id": warehouse_id,
                "attempts": attempts,
            },
        )


class StaleDocumentError(ConcurrentModificationError):
    """A bill or purchase changed between read and conditional write."""

    def __init__(self, document: str, document_id: int, expected_version: int):
        StockLedgerError.__init__(
            self,
            f"{document} {document_id} was modified concurrently "
            f"(expected version {expected_version})",
            code="DOCUMENT_MODIFIED",
            details={
                "document": document,
                "document_id": document_id,
                "expected_version": expected_version,
            },
        )


# Validation Exceptions
class ValidationError(StockLedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidUnitError(ValidationError):
    """Non-positive pieces per box or a negative quantity."""

    def __init__(self, field: str, value: Any):
        message = (
            "pieces per box must be at least 1"
            if field == "pieces_per_box"
            else "quantity must not be negative"
        )
        super().__init__(field=field, message=message, value=value)
        self.code = "INVALID_UNIT"


class OverpaidError(ValidationError):
    """Payment amounts add up to more than the bill total."""

    def __init__(self, paid: Any, grand_total: Any):
        super().__init__(
            field="payment",
            message=f"Overpaid: collected {paid} exceeds grand total {grand_total}",
            value=paid,
        )
        self.code = "OVERPAID"
        self.details.update({"paid": str(paid), "grand_total": str(grand_total)})


# Storage Exceptions
class StorageError(StockLedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(StockLedgerError):
    """Configuration error."""

    pass
