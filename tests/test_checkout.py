"""
Tests for Stripe Checkout session creation and Connect onboarding.

Stripe itself is faked; the tests assert on the parameters the gateway
would have sent.
"""

import json

import pytest

from conftest import auth_headers

CHECKOUT_BODY = {
    "success_url": "https://sprout.test/checkout/success",
    "cancel_url": "https://sprout.test/cart",
}


@pytest.fixture
async def cart_ready(client, make_user, make_listing):
    await make_user("seller", "seller_sam")
    await make_user("buyer", "buyer_bea")
    plant = await make_listing(
        "seller",
        name="Pink Princess",
        description="x" * 150,
        price=19.99,
        quantity=5,
    )
    await client.post(
        "/api/v1/cart/items",
        json={"plant_id": plant["id"], "quantity": 2},
        headers=auth_headers("buyer"),
    )
    return plant


class TestCartCheckout:
    async def test_session_payload(self, client, cart_ready, stripe_gateway) -> None:
        response = await client.post(
            "/api/v1/checkout", json=CHECKOUT_BODY, headers=auth_headers("buyer", "bea@sprout.test")
        )

        assert response.status_code == 200
        assert response.json()["session_id"] == "cs_test_1"
        assert response.json()["url"].startswith("https://checkout.stripe.test/")

        params = stripe_gateway.checkout_sessions[0]
        assert params["mode"] == "payment"
        assert params["customer_email"] == "bea@sprout.test"
        assert params["success_url"] == CHECKOUT_BODY["success_url"]

        line = params["line_items"][0]
        assert line["quantity"] == 2
        assert line["price_data"]["currency"] == "usd"
        assert line["price_data"]["unit_amount"] == 1999
        assert line["price_data"]["product_data"]["name"] == "Pink Princess"
        assert len(line["price_data"]["product_data"]["description"]) == 100

        assert params["metadata"]["user_id"] == "buyer"
        snapshot = json.loads(params["metadata"]["cart_items"])
        assert snapshot == [
            {
                "plant_id": cart_ready["id"],
                "name": "Pink Princess",
                "price": 19.99,
                "quantity": 2,
                "image_url": None,
                "seller_id": "seller",
            }
        ]

    async def test_empty_cart_is_400(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")

        response = await client.post("/api/v1/checkout", json=CHECKOUT_BODY, headers=auth_headers("buyer"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_CART"

    async def test_stock_changes_are_reported(self, client, cart_ready, stripe_gateway) -> None:
        await client.patch(
            f"/api/v1/plants/{cart_ready['id']}", json={"quantity": 1}, headers=auth_headers("seller")
        )

        response = await client.post("/api/v1/checkout", json=CHECKOUT_BODY, headers=auth_headers("buyer"))

        assert response.status_code == 200
        assert response.json()["adjustments"][0]["reason"] == "clamped"
        assert stripe_gateway.checkout_sessions[0]["line_items"][0]["quantity"] == 1

    async def test_listing_turned_trade_only_is_left_out(self, client, cart_ready, make_listing) -> None:
        other = await make_listing("seller", name="Hoya", price=8.0)
        await client.post(
            "/api/v1/cart/items", json={"plant_id": other["id"]}, headers=auth_headers("buyer")
        )
        await client.patch(
            f"/api/v1/plants/{cart_ready['id']}", json={"listing_type": "trade"}, headers=auth_headers("seller")
        )
        await client.patch(
            f"/api/v1/plants/{other['id']}", json={"listing_type": "trade"}, headers=auth_headers("seller")
        )

        response = await client.post("/api/v1/checkout", json=CHECKOUT_BODY, headers=auth_headers("buyer"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOTHING_PURCHASABLE"

    async def test_invalid_redirect_url_is_422(self, client, cart_ready) -> None:
        response = await client.post(
            "/api/v1/checkout",
            json={"success_url": "not a url", "cancel_url": CHECKOUT_BODY["cancel_url"]},
            headers=auth_headers("buyer"),
        )

        assert response.status_code == 422

    async def test_unconfigured_stripe_is_503(
        self, client, cart_ready, stripe_gateway, override_settings
    ) -> None:
        stripe_gateway.settings = override_settings(STRIPE_SECRET_KEY=None)

        response = await client.post("/api/v1/checkout", json=CHECKOUT_BODY, headers=auth_headers("buyer"))

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_NOT_CONFIGURED"
        assert stripe_gateway.checkout_sessions == []


class TestSubscriptionCheckout:
    async def test_subscription_session(self, client, make_user, stripe_gateway) -> None:
        await make_user("buyer", "buyer_bea")

        response = await client.post(
            "/api/v1/checkout/subscription", json=CHECKOUT_BODY, headers=auth_headers("buyer")
        )

        assert response.status_code == 200
        params = stripe_gateway.checkout_sessions[0]
        assert params["mode"] == "subscription"
        assert params["line_items"] == [{"price": "price_pro_monthly", "quantity": 1}]
        assert params["metadata"] == {"user_id": "buyer", "kind": "pro_subscription"}
        assert params["subscription_data"] == {"metadata": {"user_id": "buyer"}}

    async def test_missing_price_id_is_503(self, client, make_user, stripe_gateway, override_settings) -> None:
        await make_user("buyer", "buyer_bea")
        override_settings(STRIPE_PRO_PRICE_ID=None)

        response = await client.post(
            "/api/v1/checkout/subscription", json=CHECKOUT_BODY, headers=auth_headers("buyer")
        )

        assert response.status_code == 503


class TestConnectOnboarding:
    async def test_first_call_creates_account(self, client, make_user, stripe_gateway) -> None:
        await make_user("seller", "seller_sam")

        response = await client.post("/api/v1/stripe/connect/onboarding-link", headers=auth_headers("seller"))

        assert response.status_code == 200
        assert response.json()["url"] == "https://connect.stripe.test/setup/acct_test_1"
        assert stripe_gateway.accounts == [{"email": "seller@sprout.test", "user_id": "seller"}]
        assert stripe_gateway.account_links[0]["return_url"] == "https://sprout.test/seller/return"

        profile = await client.get("/api/v1/users/me", headers=auth_headers("seller"))
        assert profile.json()["stripe_account_id"] == "acct_test_1"

    async def test_existing_account_is_reused(self, client, make_user, stripe_gateway) -> None:
        await make_user("seller", "seller_sam")

        await client.post("/api/v1/stripe/connect/onboarding-link", headers=auth_headers("seller"))
        await client.post("/api/v1/stripe/connect/onboarding-link", headers=auth_headers("seller"))

        assert len(stripe_gateway.accounts) == 1
        assert len(stripe_gateway.account_links) == 2

    async def test_missing_return_urls_is_503(self, client, make_user, override_settings) -> None:
        await make_user("seller", "seller_sam")
        override_settings(STRIPE_CONNECT_RETURN_URL=None)

        response = await client.post("/api/v1/stripe/connect/onboarding-link", headers=auth_headers("seller"))

        assert response.status_code == 503
