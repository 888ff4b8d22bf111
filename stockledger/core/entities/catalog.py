"""Catalog entities: products, warehouses and dealers."""

from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.identifiers import EntityId


class Product(BaseModel):
    """A sellable product and its box configuration."""

    id: EntityId
    name: str
    sku: str | None = None
    pieces_per_box: int = Field(default=1, ge=1)
    purchase_price: Decimal = Field(default=Decimal("0"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)  # tax-inclusive
    tax_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    hsn_code: str | None = None


class Warehouse(BaseModel):
    """A physical stock location."""

    id: EntityId
    name: str
    location: str | None = None


class Dealer(BaseModel):
    """A supplier that purchase orders are placed with."""

    id: EntityId
    name: str
    phone: str | None = None
    address: str | None = None
    gstin: str | None = None
