"""Stock ledger domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockledger.core.entities.identifiers import EntityId
from stockledger.core.exceptions import InvalidUnitError


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StockStatus(str, Enum):
    """Availability state of a stock row."""

    OK = "OK"
    LOW = "LOW"
    OUT = "OUT"


class StockRecord(BaseModel):
    """
    Stock held for one (product, warehouse) pair.

    Records are immutable. The ledger produces every new state through
    with_pieces(), which re-splits a piece count into whole boxes and
    loose pieces.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    product_id: EntityId
    warehouse_id: EntityId
    boxes: int = Field(default=0, ge=0)
    loose_items: int = Field(default=0, ge=0)
    pieces_per_box: int = Field(default=1, ge=1)
    low_stock_boxes: int | None = Field(default=None, ge=0)
    low_stock_items: int | None = Field(default=None, ge=0)
    version: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def check_loose_below_box(self) -> "StockRecord":
        """Loose pieces never fill a whole box."""
        if self.loose_items >= self.pieces_per_box:
            raise ValueError(
                f"loose_items ({self.loose_items}) must be below "
                f"pieces_per_box ({self.pieces_per_box})"
            )
        return self

    @property
    def total_pieces(self) -> int:
        return self.boxes * self.pieces_per_box + self.loose_items

    @property
    def low_stock_threshold(self) -> int | None:
        """Threshold in pieces, or None when no threshold is configured."""
        if self.low_stock_boxes is None and self.low_stock_items is None:
            return None
        return (self.low_stock_boxes or 0) * self.pieces_per_box + (
            self.low_stock_items or 0
        )

    def with_pieces(self, pieces: int, pieces_per_box: int | None = None) -> "StockRecord":
        """Return a copy holding `pieces`, split by `pieces_per_box`."""
        ppb = pieces_per_box or self.pieces_per_box
        if ppb < 1:
            raise InvalidUnitError("pieces_per_box", ppb)
        if pieces < 0:
            raise InvalidUnitError("pieces", pieces)
        boxes, loose = divmod(pieces, ppb)
        return self.model_copy(
            update={
                "boxes": boxes,
                "loose_items": loose,
                "pieces_per_box": ppb,
                "updated_at": _utcnow(),
            }
        )


class TransactionDelta(BaseModel):
    """A signed piece change requested against one stock row. Never persisted."""

    model_config = ConfigDict(frozen=True)

    product_id: EntityId
    warehouse_id: EntityId
    pieces: int  # positive = stock in, negative = stock out
    pieces_per_box: int | None = Field(default=None, ge=1)

    @property
    def key(self) -> tuple[str, str]:
        return (self.product_id, self.warehouse_id)


class StockMovement(BaseModel):
    """Audit row written for every applied delta."""

    id: int | None = None
    stock_record_id: int
    pieces_delta: int
    boxes_after: int
    loose_after: int
    reference: str | None = None  # e.g. "bill:12", "purchase:4:revert"
    created_at: datetime = Field(default_factory=_utcnow)
