"""API tests for bill endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.usefixtures("seeded_catalog")


def _bill_body(loose: int = 10, warehouse_id: str = "W1", cash: str = "1180.00") -> dict:
    return {
        "bill_number": "B-001",
        "customer": {"name": "Ravi Traders", "phone": "9811111111"},
        "bill_date": "2024-03-05",
        "lines": [
            {
                "product_id": "P1",
                "warehouse_id": warehouse_id,
                "selling_price": "118.00",
                "tax_percent": "18",
                "quantity_loose": loose,
            }
        ],
        "payment": {"mode": "CASH", "cash_amount": cash},
    }


@pytest.fixture
async def stocked(seeded_catalog, async_client: AsyncClient) -> None:
    """125 pieces of P1 in W1 and 24 in W2."""
    for warehouse_id, boxes, loose in (("W1", 10, 5), ("W2", 2, 0)):
        response = await async_client.post(
            "/api/stock",
            json={
                "product_id": "P1",
                "warehouse_id": warehouse_id,
                "boxes": boxes,
                "loose_items": loose,
            },
        )
        assert response.status_code == 201


async def _pieces(client: AsyncClient, warehouse_id: str = "W1") -> int:
    return (await client.get(f"/api/stock/P1/{warehouse_id}")).json()["total_pieces"]


@pytest.mark.usefixtures("stocked")
class TestCreateBill:
    async def test_prices_and_takes_stock(self, async_client: AsyncClient):
        response = await async_client.post("/api/bills", json=_bill_body())

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["grand_total"], str)
        assert Decimal(data["grand_total"]) == Decimal("1180.00")
        assert Decimal(data["total_tax"]) == Decimal("180.00")
        assert Decimal(data["total_before_tax"]) == Decimal("1000.00")
        assert Decimal(data["balance_amount"]) == 0
        assert data["lines"][0]["pieces_per_box"] == 12
        assert data["lines"][0]["product_name"] == "Ceramic Tile 600x600"
        assert await _pieces(async_client) == 115

    async def test_links_customer_by_phone(self, async_client: AsyncClient):
        response = await async_client.post("/api/bills", json=_bill_body())

        customer_id = response.json()["customer"]["customer_id"]
        registry = (
            await async_client.get("/api/customers", params={"q": "9811111111"})
        ).json()["customers"]
        assert [c["id"] for c in registry] == [customer_id]
        assert registry[0]["name"] == "Ravi Traders"

    async def test_overpaid_bill_changes_nothing(self, async_client: AsyncClient):
        response = await async_client.post("/api/bills", json=_bill_body(cash="2000.00"))

        assert response.status_code == 400
        assert response.json()["error_code"] == "OVERPAID"
        assert await _pieces(async_client) == 125
        assert (await async_client.get("/api/bills")).json()["total"] == 0

    async def test_insufficient_stock_changes_nothing(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/bills", json=_bill_body(loose=200, cash="0")
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"
        assert await _pieces(async_client) == 125
        assert (await async_client.get("/api/bills")).json()["total"] == 0

    async def test_zero_quantity_line(self, async_client: AsyncClient):
        response = await async_client.post("/api/bills", json=_bill_body(loose=0, cash="0"))

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_unknown_warehouse(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/bills", json=_bill_body(warehouse_id="W9", cash="0")
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "WAREHOUSE_NOT_FOUND"

    async def test_no_lines(self, async_client: AsyncClient):
        body = _bill_body()
        body["lines"] = []

        response = await async_client.post("/api/bills", json=body)

        assert response.status_code == 422


@pytest.mark.usefixtures("stocked")
class TestEditBill:
    async def test_applies_net_difference(self, async_client: AsyncClient):
        bill_id = (await async_client.post("/api/bills", json=_bill_body())).json()["id"]

        response = await async_client.put(
            f"/api/bills/{bill_id}", json=_bill_body(loose=4, cash="472.00")
        )

        assert response.status_code == 200
        assert Decimal(response.json()["grand_total"]) == Decimal("472.00")
        assert response.json()["version"] == 1
        assert await _pieces(async_client) == 121

    async def test_move_line_to_other_warehouse(self, async_client: AsyncClient):
        bill_id = (await async_client.post("/api/bills", json=_bill_body())).json()["id"]

        await async_client.put(f"/api/bills/{bill_id}", json=_bill_body(warehouse_id="W2"))

        assert await _pieces(async_client, "W1") == 125
        assert await _pieces(async_client, "W2") == 14

    async def test_rejected_edit_leaves_bill(self, async_client: AsyncClient):
        bill_id = (await async_client.post("/api/bills", json=_bill_body())).json()["id"]

        response = await async_client.put(
            f"/api/bills/{bill_id}", json=_bill_body(loose=500, cash="0")
        )

        assert response.status_code == 409
        assert await _pieces(async_client) == 115
        stored = (await async_client.get(f"/api/bills/{bill_id}")).json()
        assert stored["lines"][0]["total_pieces"] == 10

    async def test_missing_bill(self, async_client: AsyncClient):
        response = await async_client.put("/api/bills/404", json=_bill_body())

        assert response.status_code == 404
        assert response.json()["error_code"] == "BILL_NOT_FOUND"


class TestReadBills:
    async def test_get_missing(self, async_client: AsyncClient):
        response = await async_client.get("/api/bills/1")

        assert response.status_code == 404
        assert response.json()["error_code"] == "BILL_NOT_FOUND"

    @pytest.mark.usefixtures("stocked")
    async def test_list(self, async_client: AsyncClient):
        await async_client.post("/api/bills", json=_bill_body())
        await async_client.post("/api/bills", json=_bill_body(loose=1, cash="0"))

        data = (await async_client.get("/api/bills", params={"limit": 1})).json()

        assert data["total"] == 1
        assert data["bills"][0]["lines"][0]["total_pieces"] == 1
