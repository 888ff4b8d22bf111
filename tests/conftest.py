"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from decimal import Decimal
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.application.services import reset_services
from stockledger.config import reset_settings
from stockledger.core.entities import Dealer, Product, Warehouse
from stockledger.infrastructure.storage.sqlite import connection as conn_module
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool
from stockledger.infrastructure.storage.sqlite.migrations import run_migrations


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temp data dir and drop cached services."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LEDGER_RETRY_DELAY", "0")
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


# --- Database ---


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await run_migrations(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def db_pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Install a pool on the migrated database as the global pool."""
    pool = ConnectionPool(initialized_db, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    previous = conn_module._pool
    conn_module._pool = pool
    yield pool
    conn_module._pool = previous
    await pool.close()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    from stockledger.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- Catalog ---


@pytest.fixture
def product() -> Product:
    """Product sold in boxes of 12 at 118.00 including 18% tax."""
    return Product(
        id="P1",
        name="Ceramic Tile 600x600",
        sku="TILE-600",
        pieces_per_box=12,
        purchase_price=Decimal("80.00"),
        selling_price=Decimal("118.00"),
        tax_percent=Decimal("18"),
    )


@pytest.fixture
def other_product() -> Product:
    return Product(
        id="P2",
        name="Tile Adhesive",
        pieces_per_box=4,
        purchase_price=Decimal("250.00"),
        selling_price=Decimal("354.00"),
        tax_percent=Decimal("18"),
    )


@pytest.fixture
def warehouse() -> Warehouse:
    return Warehouse(id="W1", name="Main Godown", location="Ring Road")


@pytest.fixture
def other_warehouse() -> Warehouse:
    return Warehouse(id="W2", name="Shop Floor")


@pytest.fixture
def dealer() -> Dealer:
    return Dealer(id="D1", name="Kajaria Distributors", phone="9800000000")
