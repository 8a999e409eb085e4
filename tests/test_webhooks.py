"""
Tests for the Stripe webhook endpoints and the order fulfilment they drive.

Events are signed with the configured test secrets so the real signature
check runs.
"""

from datetime import timedelta

import pytest

from conftest import auth_headers, stripe_event, stripe_signature
from sprout.background_jobs.tasks.maintenance import expire_pro
from sprout.shared.infrastructure.database.session import session_manager
from sprout.shared.utils.helpers import utc_now

CHECKOUT_SECRET = "whsec_checkout"
CONNECT_SECRET = "whsec_connect"
CHECKOUT_BODY = {
    "success_url": "https://sprout.test/checkout/success",
    "cancel_url": "https://sprout.test/cart",
}


async def deliver(client, payload: bytes, secret: str = CHECKOUT_SECRET, path: str = "/api/v1/webhooks/stripe"):
    return await client.post(
        path,
        content=payload,
        headers={"stripe-signature": stripe_signature(payload, secret), "content-type": "application/json"},
    )


async def make_pro(client, user_id: str) -> None:
    session = {
        "id": f"cs_sub_{user_id}",
        "customer": f"cus_{user_id}",
        "metadata": {"user_id": user_id, "kind": "pro_subscription"},
    }
    response = await deliver(client, stripe_event("checkout.session.completed", session))
    assert response.status_code == 200


@pytest.fixture
async def paid_session(client, make_user, make_listing, stripe_gateway):
    """A checkout session for two plants, as Stripe would report it once paid."""
    await make_user("seller", "seller_sam")
    await make_user("buyer", "buyer_bea")
    plant = await make_listing("seller", name="Pink Princess", price=19.99, quantity=5)
    await client.post(
        "/api/v1/cart/items",
        json={"plant_id": plant["id"], "quantity": 2},
        headers=auth_headers("buyer"),
    )
    await client.post("/api/v1/checkout", json=CHECKOUT_BODY, headers=auth_headers("buyer"))

    return {
        "plant": plant,
        "session": {
            "id": "cs_test_1",
            "object": "checkout.session",
            "payment_status": "paid",
            "metadata": stripe_gateway.checkout_sessions[0]["metadata"],
        },
    }


class TestSignature:
    async def test_wrong_secret_is_400(self, client) -> None:
        payload = stripe_event("checkout.session.completed", {"id": "cs_x", "metadata": {}})

        response = await deliver(client, payload, secret="whsec_wrong")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "WEBHOOK_SIGNATURE_ERROR"

    async def test_missing_header_is_400(self, client) -> None:
        response = await client.post(
            "/api/v1/webhooks/stripe", content=stripe_event("ping", {})
        )

        assert response.status_code == 400

    async def test_missing_secret_is_500(self, client, stripe_gateway, override_settings) -> None:
        override_settings(STRIPE_CHECKOUT_WEBHOOK_SECRET=None)

        response = await deliver(client, stripe_event("ping", {}))

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "SERVICE_NOT_CONFIGURED"

    async def test_unhandled_event_is_acknowledged(self, client) -> None:
        response = await deliver(client, stripe_event("invoice.created", {"id": "in_1"}))

        assert response.status_code == 200
        assert response.json() == {"received": True}


class TestCheckoutCompleted:
    async def test_creates_order_and_settles(self, client, paid_session) -> None:
        payload = stripe_event("checkout.session.completed", paid_session["session"])

        response = await deliver(client, payload)

        assert response.status_code == 200
        assert response.json()["received"] is True
        order_id = response.json()["order_id"]

        orders = (await client.get("/api/v1/orders", headers=auth_headers("buyer"))).json()["orders"]
        assert [o["id"] for o in orders] == [order_id]
        assert orders[0]["total_amount"] == 39.98
        assert orders[0]["status"] == "paid"
        assert orders[0]["seller_ids"] == ["seller"]

        plant = (await client.get(f"/api/v1/plants/{paid_session['plant']['id']}")).json()
        assert plant["quantity"] == 3

        cart = (await client.get("/api/v1/cart", headers=auth_headers("buyer"))).json()
        assert cart["items"] == []

        buyer = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        seller = (await client.get("/api/v1/users/me", headers=auth_headers("seller"))).json()
        assert buyer["reward_points"] == 20
        assert seller["reward_points"] == 10 + 25
        assert seller["plants_traded"] == 2

        notifications = (await client.get("/api/v1/notifications", headers=auth_headers("seller"))).json()
        assert notifications["notifications"][0]["type"] == "order"

    async def test_redelivery_is_idempotent(self, client, paid_session) -> None:
        payload = stripe_event("checkout.session.completed", paid_session["session"])

        first = await deliver(client, payload)
        second = await deliver(client, payload)

        assert first.json()["order_id"] == second.json()["order_id"]
        orders = (await client.get("/api/v1/orders", headers=auth_headers("buyer"))).json()["orders"]
        assert len(orders) == 1
        plant = (await client.get(f"/api/v1/plants/{paid_session['plant']['id']}")).json()
        assert plant["quantity"] == 3
        buyer = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert buyer["reward_points"] == 20

    async def test_missing_metadata_is_400(self, client) -> None:
        payload = stripe_event("checkout.session.completed", {"id": "cs_x", "metadata": {"user_id": "buyer"}})

        response = await deliver(client, payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_METADATA"

    async def test_handler_failure_is_500(self, client, paid_session) -> None:
        session = dict(paid_session["session"])
        session["metadata"] = {**session["metadata"], "user_id": "deleted-user"}

        response = await deliver(client, stripe_event("checkout.session.completed", session))

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "WEBHOOK_PROCESSING_ERROR"


class TestOrders:
    async def test_seller_views_and_ships(self, client, paid_session) -> None:
        order_id = (
            await deliver(client, stripe_event("checkout.session.completed", paid_session["session"]))
        ).json()["order_id"]

        sales = (await client.get("/api/v1/orders/sales", headers=auth_headers("seller"))).json()["orders"]
        assert [o["id"] for o in sales] == [order_id]

        await make_pro(client, "seller")
        stats = (await client.get("/api/v1/orders/sales/stats", headers=auth_headers("seller"))).json()
        assert stats == {
            "revenue": 39.98,
            "sales": 2,
            "active_listings": 1,
            "top_plants": {"Pink Princess": 2},
        }

        shipped = await client.post(
            f"/api/v1/orders/{order_id}/ship",
            json={"tracking_number": "TRACK123"},
            headers=auth_headers("seller"),
        )
        assert shipped.status_code == 200
        assert shipped.json()["status"] == "shipped"
        assert shipped.json()["tracking_number"] == "TRACK123"

        buyer_notes = (await client.get("/api/v1/notifications", headers=auth_headers("buyer"))).json()
        assert "TRACK123" in buyer_notes["notifications"][0]["message"]

    async def test_stats_need_pro(self, client, paid_session) -> None:
        response = await client.get("/api/v1/orders/sales/stats", headers=auth_headers("seller"))

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "SUBSCRIPTION_ERROR"
        assert response.json()["error"]["details"]["subscription_status"] == "free"

    async def test_order_ships_once(self, client, paid_session) -> None:
        order_id = (
            await deliver(client, stripe_event("checkout.session.completed", paid_session["session"]))
        ).json()["order_id"]
        url = f"/api/v1/orders/{order_id}/ship"

        first = await client.post(url, json={"tracking_number": "TRACK123"}, headers=auth_headers("seller"))
        second = await client.post(url, json={"tracking_number": "TRACK999"}, headers=auth_headers("seller"))

        assert first.status_code == 200
        assert second.status_code == 422
        order = (await client.get("/api/v1/orders/sales", headers=auth_headers("seller"))).json()["orders"][0]
        assert order["tracking_number"] == "TRACK123"

    async def test_buyer_cannot_ship(self, client, paid_session) -> None:
        order_id = (
            await deliver(client, stripe_event("checkout.session.completed", paid_session["session"]))
        ).json()["order_id"]

        response = await client.post(
            f"/api/v1/orders/{order_id}/ship",
            json={"tracking_number": "TRACK123"},
            headers=auth_headers("buyer"),
        )

        assert response.status_code == 403


class TestSubscriptions:
    async def test_pro_checkout_upgrades_member(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")
        session = {
            "id": "cs_sub_1",
            "customer": "cus_123",
            "metadata": {"user_id": "buyer", "kind": "pro_subscription"},
        }

        response = await deliver(client, stripe_event("checkout.session.completed", session))

        assert response.status_code == 200
        profile = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert profile["is_pro"] is True
        assert profile["subscription"]["status"] == "pro"
        assert profile["subscription"]["expiry_date"] is not None

    async def test_update_sets_period_end(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")
        subscription = {
            "id": "sub_1",
            "customer": "cus_123",
            "status": "active",
            "current_period_end": 1893456000,
            "metadata": {"user_id": "buyer"},
        }

        await deliver(client, stripe_event("customer.subscription.updated", subscription))

        profile = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert profile["subscription"]["status"] == "pro"
        assert profile["subscription"]["expiry_date"].startswith("2030-01-01")

    async def test_lapsed_status_downgrades(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")
        base = {"id": "sub_1", "customer": "cus_123", "metadata": {"user_id": "buyer"}}
        await deliver(
            client,
            stripe_event("customer.subscription.updated", {**base, "status": "active", "current_period_end": 1893456000}),
        )

        await deliver(client, stripe_event("customer.subscription.updated", {**base, "status": "past_due"}))

        profile = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert profile["is_pro"] is False

    async def test_deletion_resolves_member_by_customer(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")
        await deliver(
            client,
            stripe_event(
                "checkout.session.completed",
                {"id": "cs_sub_1", "customer": "cus_123", "metadata": {"user_id": "buyer", "kind": "pro_subscription"}},
            ),
        )

        response = await deliver(
            client, stripe_event("customer.subscription.deleted", {"id": "sub_1", "customer": "cus_123"})
        )

        assert response.status_code == 200
        profile = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert profile["subscription"]["status"] == "free"

    async def test_expiry_job_downgrades_lapsed_members(
        self, client, make_user, session_factory, stripe_gateway, monkeypatch
    ) -> None:
        await make_user("buyer", "buyer_bea")
        await make_pro(client, "buyer")
        monkeypatch.setattr(session_manager, "_session_factory", session_factory)

        assert await expire_pro(now=utc_now() + timedelta(days=1), stripe_gateway=stripe_gateway) == []
        assert await expire_pro(now=utc_now() + timedelta(days=31), stripe_gateway=stripe_gateway) == ["buyer"]

        profile = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert profile["is_pro"] is False

    async def test_expiry_job_keeps_live_stripe_subscribers(
        self, client, make_user, session_factory, stripe_gateway, monkeypatch
    ) -> None:
        await make_user("buyer", "buyer_bea")
        await make_pro(client, "buyer")
        stripe_gateway.live_customers.append("cus_buyer")
        monkeypatch.setattr(session_manager, "_session_factory", session_factory)

        assert await expire_pro(now=utc_now() + timedelta(days=31), stripe_gateway=stripe_gateway) == []

        profile = (await client.get("/api/v1/users/me", headers=auth_headers("buyer"))).json()
        assert profile["is_pro"] is True

    async def test_unknown_customer_is_acknowledged(self, client) -> None:
        response = await deliver(
            client, stripe_event("customer.subscription.deleted", {"id": "sub_1", "customer": "cus_nobody"})
        )

        assert response.status_code == 200
        assert response.json()["message"] == "No matching user."


class TestConnectEvents:
    async def test_account_updated_records_onboarding(self, client, make_user) -> None:
        await make_user("seller", "seller_sam")
        account = {"id": "acct_9", "details_submitted": True, "metadata": {"user_id": "seller"}}

        response = await deliver(
            client,
            stripe_event("account.updated", account),
            secret=CONNECT_SECRET,
            path="/api/v1/webhooks/stripe-connect",
        )

        assert response.status_code == 200
        profile = (await client.get("/api/v1/users/me", headers=auth_headers("seller"))).json()
        assert profile["stripe_account_id"] == "acct_9"
        assert profile["stripe_details_submitted"] is True

    async def test_account_without_user_is_acknowledged(self, client) -> None:
        response = await deliver(
            client,
            stripe_event("account.updated", {"id": "acct_9", "metadata": {}}),
            secret=CONNECT_SECRET,
            path="/api/v1/webhooks/stripe-connect",
        )

        assert response.status_code == 200
        assert response.json()["message"] == "No userId in metadata."

    async def test_connect_endpoint_uses_its_own_secret(self, client) -> None:
        response = await deliver(
            client,
            stripe_event("account.updated", {"id": "acct_9", "metadata": {}}),
            secret=CHECKOUT_SECRET,
            path="/api/v1/webhooks/stripe-connect",
        )

        assert response.status_code == 400
