"""API tests for dealer payments and the dealer ledger."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.usefixtures("seeded_catalog")


async def _pay(client: AsyncClient, amount: str = "1000.00", day: int = 10) -> dict:
    response = await client.post(
        "/api/dealers/D1/payments",
        json={
            "amount": amount,
            "payment_mode": "UPI",
            "payment_date": f"2024-03-{day:02d}",
            "note": "NEFT ref 991",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestDealerPayments:
    async def test_record(self, async_client: AsyncClient):
        data = await _pay(async_client)

        assert data["dealer_id"] == "D1"
        assert Decimal(data["amount"]) == Decimal("1000.00")
        assert data["payment_mode"] == "UPI"

    async def test_unknown_dealer(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/dealers/D9/payments",
            json={"amount": "10", "payment_date": "2024-03-01"},
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "DEALER_NOT_FOUND"

    async def test_non_positive_amount(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/dealers/D1/payments",
            json={"amount": "0", "payment_date": "2024-03-01"},
        )
        assert response.status_code == 422

    async def test_partial_update(self, async_client: AsyncClient):
        payment = await _pay(async_client)

        response = await async_client.put(
            f"/api/dealer-payments/{payment['id']}", json={"amount": "1200.50"}
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("1200.50")
        assert data["note"] == "NEFT ref 991"

    async def test_update_cannot_null_amount(self, async_client: AsyncClient):
        payment = await _pay(async_client)

        response = await async_client.put(
            f"/api/dealer-payments/{payment['id']}", json={"amount": None}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_update_missing(self, async_client: AsyncClient):
        response = await async_client.put("/api/dealer-payments/77", json={"note": "x"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "DEALER_PAYMENT_NOT_FOUND"


class TestDealerLedger:
    async def test_running_balance(self, async_client: AsyncClient):
        purchase = await async_client.post(
            "/api/purchases",
            json={
                "dealer_id": "D1",
                "warehouse_id": "W1",
                "invoice_number": "INV-1",
                "purchase_date": "2024-03-05",
                "lines": [
                    {
                        "product_id": "P1",
                        "boxes": 2,
                        "purchase_price": "80.00",
                        "discount_percent": "5",
                        "tax_percent": "18",
                    }
                ],
            },
        )
        assert purchase.status_code == 201
        await _pay(async_client, amount="1000.00", day=10)
        await _pay(async_client, amount="50.00", day=2)

        response = await async_client.get("/api/dealers/D1/ledger", params={"month": "2024-03"})

        assert response.status_code == 200
        data = response.json()
        assert data["period_start"] == "2024-03-01"
        assert data["period_end"] == "2024-03-31"
        assert [e["entry_type"] for e in data["entries"]] == ["PAYMENT", "PURCHASE", "PAYMENT"]
        assert [Decimal(e["balance"]) for e in data["entries"]] == [
            Decimal("-50.00"),
            Decimal("2102.32"),
            Decimal("1102.32"),
        ]
        assert Decimal(data["summary"]["total_purchase"]) == Decimal("2152.32")
        assert Decimal(data["summary"]["total_paid"]) == Decimal("1050.00")
        assert Decimal(data["summary"]["balance"]) == Decimal("1102.32")

    async def test_explicit_period(self, async_client: AsyncClient):
        await _pay(async_client, day=2)
        await _pay(async_client, day=20)

        response = await async_client.get(
            "/api/dealers/D1/ledger",
            params={"period_start": "2024-03-01", "period_end": "2024-03-10"},
        )

        assert len(response.json()["entries"]) == 1

    async def test_month_and_period_together(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/dealers/D1/ledger",
            params={
                "month": "2024-03",
                "period_start": "2024-03-01",
                "period_end": "2024-03-10",
            },
        )

        assert response.status_code == 400

    async def test_bad_month(self, async_client: AsyncClient):
        response = await async_client.get("/api/dealers/D1/ledger", params={"month": "2024-13"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_unknown_dealer(self, async_client: AsyncClient):
        response = await async_client.get("/api/dealers/D9/ledger", params={"month": "2024-03"})

        assert response.status_code == 404
