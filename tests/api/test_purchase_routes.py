"""API tests for purchase endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.usefixtures("seeded_catalog")


def _purchase_body(warehouse_id: str = "W1", boxes: int = 2, dealer_id: str = "D1") -> dict:
    return {
        "dealer_id": dealer_id,
        "warehouse_id": warehouse_id,
        "invoice_number": "INV-77",
        "purchase_date": "2024-03-05",
        "lines": [
            {
                "product_id": "P1",
                "boxes": boxes,
                "purchase_price": "80.00",
                "discount_percent": "5",
                "tax_percent": "18",
            }
        ],
    }


class TestCreatePurchase:
    async def test_prices_and_receives_stock(self, async_client: AsyncClient):
        response = await async_client.post("/api/purchases", json=_purchase_body())

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["sub_total"]) == Decimal("1824.00")
        assert Decimal(data["tax_total"]) == Decimal("328.32")
        assert Decimal(data["grand_total"]) == Decimal("2152.32")
        assert data["lines"][0]["warehouse_id"] == "W1"
        assert data["lines"][0]["pieces_per_box"] == 12

        stock = (await async_client.get("/api/stock/P1/W1")).json()
        assert (stock["boxes"], stock["loose_items"]) == (2, 0)

    async def test_unknown_dealer(self, async_client: AsyncClient):
        response = await async_client.post("/api/purchases", json=_purchase_body(dealer_id="D9"))

        assert response.status_code == 404
        assert response.json()["error_code"] == "DEALER_NOT_FOUND"

    async def test_zero_quantity(self, async_client: AsyncClient):
        response = await async_client.post("/api/purchases", json=_purchase_body(boxes=0))

        assert response.status_code == 400
        assert (await async_client.get("/api/stock/P1/W1")).status_code == 404


class TestEditPurchase:
    async def test_increase_quantity(self, async_client: AsyncClient):
        purchase_id = (await async_client.post("/api/purchases", json=_purchase_body())).json()[
            "id"
        ]

        response = await async_client.put(
            f"/api/purchases/{purchase_id}", json=_purchase_body(boxes=5)
        )

        assert response.status_code == 200
        assert (await async_client.get("/api/stock/P1/W1")).json()["boxes"] == 5

    async def test_move_after_sale_is_rejected(self, async_client: AsyncClient):
        purchase_id = (await async_client.post("/api/purchases", json=_purchase_body())).json()[
            "id"
        ]
        sold = await async_client.post(
            "/api/bills",
            json={
                "customer": {"name": "Walk-in"},
                "lines": [
                    {
                        "product_id": "P1",
                        "warehouse_id": "W1",
                        "selling_price": "118.00",
                        "tax_percent": "18",
                        "quantity_loose": 20,
                    }
                ],
            },
        )
        assert sold.status_code == 201

        response = await async_client.put(
            f"/api/purchases/{purchase_id}", json=_purchase_body(warehouse_id="W2")
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"
        assert (await async_client.get("/api/stock/P1/W1")).json()["total_pieces"] == 4
        assert (await async_client.get("/api/stock/P1/W2")).status_code == 404
        stored = (await async_client.get(f"/api/purchases/{purchase_id}")).json()
        assert stored["warehouse_id"] == "W1"

    async def test_missing_purchase(self, async_client: AsyncClient):
        response = await async_client.put("/api/purchases/404", json=_purchase_body())

        assert response.status_code == 404
        assert response.json()["error_code"] == "PURCHASE_NOT_FOUND"


class TestReadPurchases:
    async def test_list_by_dealer(self, async_client: AsyncClient):
        await async_client.post("/api/purchases", json=_purchase_body())

        data = (await async_client.get("/api/purchases", params={"dealer_id": "D1"})).json()
        other = (await async_client.get("/api/purchases", params={"dealer_id": "D2"})).json()

        assert data["total"] == 1
        assert other["total"] == 0

    async def test_get_missing(self, async_client: AsyncClient):
        response = await async_client.get("/api/purchases/1")
        assert response.status_code == 404
