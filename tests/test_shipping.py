"""
Tests for the shipping compliance guide and label purchase.
"""

import pytest

from conftest import auth_headers, stripe_event, stripe_signature
from sprout.modules.shipping.domain.models import compliance
from sprout.modules.shipping.domain.models.compliance import (
    COMPLIANCE_RULES,
    Prohibition,
    get_compliance_requirements,
)
from sprout.modules.shipping.domain.models.label import ShippingRate
from sprout.modules.shipping.domain.services.shipping_service import ShippingService
from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import ExternalAPIError, ShippingProhibitedError

ADDRESS = {
    "name": "Sam Seller",
    "street1": "215 Clayton St.",
    "city": "San Francisco",
    "state": "CA",
    "zip": "94117",
    "country": "us",
}
PARCEL = {"length": 10, "width": 5, "height": 5, "weight": 2}


@pytest.fixture
async def order_id(client, make_user, make_listing, stripe_gateway):
    """A paid order from buyer to seller, settled through the checkout webhook."""
    await make_user("seller", "seller_sam")
    await make_user("buyer", "buyer_bea")
    plant = await make_listing("seller", quantity=2)
    await client.post("/api/v1/cart/items", json={"plant_id": plant["id"]}, headers=auth_headers("buyer"))
    await client.post(
        "/api/v1/checkout",
        json={"success_url": "https://sprout.test/ok", "cancel_url": "https://sprout.test/cart"},
        headers=auth_headers("buyer"),
    )
    payload = stripe_event(
        "checkout.session.completed",
        {"id": "cs_test_1", "metadata": stripe_gateway.checkout_sessions[0]["metadata"]},
    )
    response = await client.post(
        "/api/v1/webhooks/stripe",
        content=payload,
        headers={"stripe-signature": stripe_signature(payload, "whsec_checkout")},
    )
    return response.json()["order_id"]


def label_request(order_id: str) -> dict:
    return {
        "order_id": order_id,
        "from_address": ADDRESS,
        "to_address": {**ADDRESS, "name": "Bea Buyer", "zip": "94103"},
        "parcel": PARCEL,
    }


def rule_for(species, prohibited=False):
    base = COMPLIANCE_RULES[0]
    return base.model_copy(
        update={
            "plant_species": species,
            "prohibitions": Prohibition(is_prohibited=True, reason="Banned import") if prohibited else None,
        }
    )


class TestComplianceLookup:
    def test_exact_species_beats_route_wide_rule(self) -> None:
        exact = rule_for(["Ficus lyrata"])
        everything = rule_for(["ALL"])

        assert get_compliance_requirements("US", "CA", "Ficus lyrata", [everything, exact]) is exact
        assert get_compliance_requirements("US", "CA", "Hoya carnosa", [everything, exact]) is everything

    def test_other_routes_do_not_match(self) -> None:
        assert get_compliance_requirements("CA", "US", "Monstera deliciosa") is None

    def test_prohibited_rule_raises(self, monkeypatch) -> None:
        monkeypatch.setattr(compliance, "COMPLIANCE_RULES", [rule_for(["Aloe vera"], prohibited=True)])
        service = ShippingService(order_service=None, shippo_client=None, settings=get_settings())

        with pytest.raises(ShippingProhibitedError):
            service.get_compliance_requirements("US", "CA", "Aloe vera")


class TestComplianceApi:
    async def test_countries(self, client) -> None:
        response = await client.get("/api/v1/shipping/countries")

        codes = [c["code"] for c in response.json()["countries"]]
        assert "US" in codes and "CA" in codes

    async def test_known_species(self, client) -> None:
        response = await client.get(
            "/api/v1/shipping/compliance",
            params={"from": "us", "to": "ca", "species": "Monstera deliciosa"},
        )

        assert response.status_code == 200
        rule = response.json()["rule"]
        assert rule["pc_required"] is True
        assert rule["cites_required"] is False

    async def test_no_rule_is_404(self, client) -> None:
        response = await client.get(
            "/api/v1/shipping/compliance",
            params={"from": "US", "to": "CA", "species": "Pilea peperomioides"},
        )

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "No specific compliance rules found"

    async def test_unknown_country_is_422(self, client) -> None:
        response = await client.get(
            "/api/v1/shipping/compliance",
            params={"from": "US", "to": "ZZ", "species": "Monstera deliciosa"},
        )

        assert response.status_code == 422


class TestRateSelection:
    @pytest.fixture
    def service(self):
        return ShippingService(order_service=None, shippo_client=None, settings=get_settings())

    def test_preferred_service_wins(self, service, shippo_client) -> None:
        rate = service.select_rate(shippo_client.rates)

        assert rate.object_id == "rate_usps_priority"

    def test_cheapest_when_preferred_missing(self, service) -> None:
        rates = [
            {"object_id": "a", "provider": "UPS", "servicelevel": {"token": "ups_ground"}, "amount": "12.00"},
            {"object_id": "b", "provider": "FedEx", "servicelevel": {"token": "fedex_ground"}, "amount": "8.50"},
        ]

        assert service.select_rate(rates).object_id == "b"

    def test_malformed_rates_are_skipped(self, service) -> None:
        assert ShippingRate.from_shippo({"provider": "UPS"}) is None
        assert ShippingRate.from_shippo({"object_id": "x", "amount": "cheap"}) is None
        assert service.select_rate([{"provider": "UPS"}]) is None


class TestLabels:
    async def test_label_marks_order_shipped(self, client, order_id, shippo_client) -> None:
        response = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )

        assert response.status_code == 200
        assert response.json() == {
            "label_url": "https://shippo.test/labels/label_1.pdf",
            "tracking_number": "9400100000000000000000",
        }
        assert shippo_client.purchased == ["rate_usps_priority"]
        assert shippo_client.shipments[0]["address_from"]["country"] == "US"
        assert shippo_client.shipments[0]["parcel"]["weight"] == "2.0"

        sales = (await client.get("/api/v1/orders/sales", headers=auth_headers("seller"))).json()["orders"]
        assert sales[0]["status"] == "shipped"
        assert sales[0]["tracking_number"] == "9400100000000000000000"

    async def test_shipped_order_gets_no_second_label(self, client, order_id, shippo_client) -> None:
        first = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )
        second = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )

        assert first.status_code == 200
        assert second.status_code == 422
        assert second.json()["error"]["details"]["rule"] == "ship_once"
        assert shippo_client.purchased == ["rate_usps_priority"]
        assert len(shippo_client.shipments) == 1

        notes = (await client.get("/api/v1/notifications", headers=auth_headers("buyer"))).json()
        assert len([n for n in notes["notifications"] if "Tracking number" in n["message"]]) == 1

    async def test_only_the_seller_can_buy_labels(self, client, order_id, shippo_client) -> None:
        response = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("buyer")
        )

        assert response.status_code == 403
        assert shippo_client.shipments == []

    async def test_unconfigured_shippo_is_500(self, client, order_id, override_settings) -> None:
        override_settings(SHIPPO_API_KEY=None)

        response = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "SERVICE_NOT_CONFIGURED"

    async def test_no_rates_is_400(self, client, order_id, shippo_client) -> None:
        shippo_client.rates = []

        response = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Could not retrieve shipping rates for this shipment."

    async def test_refused_purchase_is_400(self, client, order_id, shippo_client) -> None:
        shippo_client.transaction = {"status": "ERROR", "messages": [{"text": "Address invalid"}]}

        response = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"]["messages"] == [{"text": "Address invalid"}]

        sales = (await client.get("/api/v1/orders/sales", headers=auth_headers("seller"))).json()["orders"]
        assert sales[0]["status"] == "paid"

    async def test_unreachable_provider_is_502(self, client, order_id, shippo_client, monkeypatch) -> None:
        async def fail(**kwargs):
            raise ExternalAPIError("Shippo timed out", service="shippo", status_code=504)

        monkeypatch.setattr(shippo_client, "create_shipment", fail)

        response = await client.post(
            "/api/v1/shipping/labels", json=label_request(order_id), headers=auth_headers("seller")
        )

        assert response.status_code == 502

    async def test_invalid_parcel_is_422(self, client, order_id) -> None:
        body = label_request(order_id)
        body["parcel"] = {**PARCEL, "weight": 0}

        response = await client.post("/api/v1/shipping/labels", json=body, headers=auth_headers("seller"))

        assert response.status_code == 422
