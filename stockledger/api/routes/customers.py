"""
Customer registry endpoints.

Customers are keyed by phone number: saving a known phone updates that
customer. Bills with a customer phone are linked to the registry the same way.
"""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import get_customers
from stockledger.application.dto.requests import SaveCustomerRequest
from stockledger.application.dto.responses import (
    CustomerListResponse,
    CustomerRecordResponse,
)
from stockledger.core.entities import Customer
from stockledger.infrastructure.storage.sqlite import SQLiteCustomerStore

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.post("", response_model=CustomerRecordResponse, status_code=status.HTTP_201_CREATED)
async def save_customer(
    request: SaveCustomerRequest,
    store: SQLiteCustomerStore = Depends(get_customers),
) -> CustomerRecordResponse:
    customer = await store.upsert(Customer(**request.model_dump()))
    return CustomerRecordResponse.model_validate(customer)


@router.get("", response_model=CustomerListResponse)
async def search_customers(
    q: str | None = Query(default=None, description="Matches name, shop name or phone"),
    limit: int = Query(default=20, ge=1, le=100),
    store: SQLiteCustomerStore = Depends(get_customers),
) -> CustomerListResponse:
    """Newest customers first, optionally filtered by `q`."""
    customers = await store.search(q, limit=limit)
    return CustomerListResponse(
        customers=[CustomerRecordResponse.model_validate(c) for c in customers]
    )
