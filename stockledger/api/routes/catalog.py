"""
Catalog endpoints: products, warehouses and dealers.
"""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import get_catalog
from stockledger.application.dto.requests import (
    CreateDealerRequest,
    CreateProductRequest,
    CreateWarehouseRequest,
)
from stockledger.application.dto.responses import (
    DealerResponse,
    ErrorResponse,
    ProductResponse,
    WarehouseResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities import Dealer, Product, Warehouse
from stockledger.infrastructure.storage.sqlite import SQLiteCatalogStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_product(
    request: CreateProductRequest,
    store: SQLiteCatalogStore = Depends(get_catalog),
) -> ProductResponse:
    product = await store.create_product(Product(**request.model_dump()))
    logger.info("product_created", product_id=product.id)
    return ProductResponse.model_validate(product)


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteCatalogStore = Depends(get_catalog),
) -> list[ProductResponse]:
    products = await store.list_products(limit=limit, offset=offset)
    return [ProductResponse.model_validate(p) for p in products]


@router.post(
    "/warehouses",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_warehouse(
    request: CreateWarehouseRequest,
    store: SQLiteCatalogStore = Depends(get_catalog),
) -> WarehouseResponse:
    warehouse = await store.create_warehouse(Warehouse(**request.model_dump()))
    logger.info("warehouse_created", warehouse_id=warehouse.id)
    return WarehouseResponse.model_validate(warehouse)


@router.get("/warehouses", response_model=list[WarehouseResponse])
async def list_warehouses(
    store: SQLiteCatalogStore = Depends(get_catalog),
) -> list[WarehouseResponse]:
    return [WarehouseResponse.model_validate(w) for w in await store.list_warehouses()]


@router.post(
    "/dealers",
    response_model=DealerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_dealer(
    request: CreateDealerRequest,
    store: SQLiteCatalogStore = Depends(get_catalog),
) -> DealerResponse:
    dealer = await store.create_dealer(Dealer(**request.model_dump()))
    logger.info("dealer_created", dealer_id=dealer.id)
    return DealerResponse.model_validate(dealer)


@router.get("/dealers", response_model=list[DealerResponse])
async def list_dealers(
    store: SQLiteCatalogStore = Depends(get_catalog),
) -> list[DealerResponse]:
    return [DealerResponse.model_validate(d) for d in await store.list_dealers()]
