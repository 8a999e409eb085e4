"""
Tests for the shopping cart and its reconciliation against listing stock.
"""

import pytest

from conftest import auth_headers


@pytest.fixture
async def plant(make_user, make_listing):
    await make_user("seller", "seller_sam")
    await make_user("buyer", "buyer_bea")
    return await make_listing("seller", price=12.5, quantity=3)


async def add(client, plant_id: str, quantity: int = 1, user: str = "buyer"):
    return await client.post(
        "/api/v1/cart/items",
        json={"plant_id": plant_id, "quantity": quantity},
        headers=auth_headers(user),
    )


class TestAddToCart:
    async def test_add_returns_priced_cart(self, client, plant) -> None:
        response = await add(client, plant["id"], quantity=2)

        assert response.status_code == 201
        body = response.json()
        assert body["item_count"] == 1
        assert body["total_price"] == 25.0
        item = body["items"][0]
        assert item["plant_id"] == plant["id"]
        assert item["quantity"] == 2
        assert item["seller_username"] == "seller_sam"
        assert body["adjustments"] == []

    async def test_cannot_buy_own_plant(self, client, plant) -> None:
        response = await add(client, plant["id"], user="seller")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "BUSINESS_RULE_VIOLATION"

    async def test_trade_only_listing_cannot_be_added(self, client, plant, make_listing) -> None:
        trade = await make_listing("seller", listing_type="trade", price=None)

        response = await add(client, trade["id"])

        assert response.status_code == 422

    async def test_duplicate_item_conflicts(self, client, plant) -> None:
        await add(client, plant["id"])
        response = await add(client, plant["id"])

        assert response.status_code == 409

    async def test_quantity_above_stock_is_rejected(self, client, plant) -> None:
        response = await add(client, plant["id"], quantity=4)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_STOCK"

    async def test_unknown_listing_is_404(self, client, plant) -> None:
        response = await add(client, "no-such-plant")

        assert response.status_code == 404


class TestUpdateCart:
    async def test_change_quantity(self, client, plant) -> None:
        await add(client, plant["id"])

        response = await client.patch(
            f"/api/v1/cart/items/{plant['id']}", json={"quantity": 3}, headers=auth_headers("buyer")
        )

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 3

    async def test_zero_quantity_removes_item(self, client, plant) -> None:
        await add(client, plant["id"])

        response = await client.patch(
            f"/api/v1/cart/items/{plant['id']}", json={"quantity": 0}, headers=auth_headers("buyer")
        )

        assert response.json()["items"] == []

    async def test_remove_and_clear(self, client, plant, make_listing) -> None:
        other = await make_listing("seller", name="Calathea")
        await add(client, plant["id"])
        await add(client, other["id"])

        removed = await client.delete(f"/api/v1/cart/items/{plant['id']}", headers=auth_headers("buyer"))
        assert [i["plant_id"] for i in removed.json()["items"]] == [other["id"]]

        cleared = await client.delete("/api/v1/cart", headers=auth_headers("buyer"))
        assert cleared.json() == {"removed": 1}


class TestReconcile:
    async def test_quantity_is_lowered_to_stock(self, client, plant) -> None:
        await add(client, plant["id"], quantity=3)
        await client.patch(
            f"/api/v1/plants/{plant['id']}", json={"quantity": 1}, headers=auth_headers("seller")
        )

        cart = (await client.get("/api/v1/cart", headers=auth_headers("buyer"))).json()

        assert cart["items"][0]["quantity"] == 1
        assert cart["adjustments"] == [
            {"plant_id": plant["id"], "old_quantity": 3, "new_quantity": 1, "reason": "clamped"}
        ]

        again = (await client.get("/api/v1/cart", headers=auth_headers("buyer"))).json()
        assert again["adjustments"] == []

    async def test_sold_out_items_are_dropped(self, client, plant) -> None:
        await add(client, plant["id"], quantity=2)
        await client.patch(
            f"/api/v1/plants/{plant['id']}", json={"quantity": 0}, headers=auth_headers("seller")
        )

        cart = (await client.get("/api/v1/cart", headers=auth_headers("buyer"))).json()

        assert cart["items"] == []
        assert cart["adjustments"][0]["reason"] == "unavailable"
        assert cart["adjustments"][0]["new_quantity"] == 0

    async def test_deleted_listing_is_dropped(self, client, plant) -> None:
        await add(client, plant["id"])
        await client.delete(f"/api/v1/plants/{plant['id']}", headers=auth_headers("seller"))

        cart = (await client.get("/api/v1/cart", headers=auth_headers("buyer"))).json()

        assert cart["items"] == []
        assert cart["adjustments"][0]["plant_id"] == plant["id"]
