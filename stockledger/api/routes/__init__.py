"""API route modules."""

from stockledger.api.routes.bills import router as bills_router
from stockledger.api.routes.catalog import router as catalog_router
from stockledger.api.routes.customers import router as customers_router
from stockledger.api.routes.dealers import router as dealers_router
from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.purchases import router as purchases_router
from stockledger.api.routes.stock import router as stock_router

__all__ = [
    "health_router",
    "catalog_router",
    "customers_router",
    "stock_router",
    "bills_router",
    "purchases_router",
    "dealers_router",
]
