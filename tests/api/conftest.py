"""Fixtures for API tests against a migrated temporary database."""

import pytest

from stockledger.infrastructure.storage.sqlite import SQLiteCatalogStore


@pytest.fixture
async def seeded_catalog(db_pool, product, other_product, warehouse, other_warehouse, dealer):
    """Two products, two warehouses and one dealer in the catalog."""
    store = SQLiteCatalogStore()
    for p in (product, other_product):
        await store.create_product(p)
    for w in (warehouse, other_warehouse):
        await store.create_warehouse(w)
    await store.create_dealer(dealer)
    return store
