"""
Tests for plant listings: creation rules, catalog paging, ownership,
images and featured placement.
"""

import io
from datetime import timedelta

import pytest
from PIL import Image

from conftest import auth_headers
from sprout.background_jobs.tasks.maintenance import expire_featured
from sprout.modules.plant_listings.domain.services.plant_listing_service import PlantListingService
from sprout.modules.plant_listings.infrastructure.database.plant_listing_repository_impl import (
    PlantListingRepositoryImpl,
)
from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import ValidationError
from sprout.shared.infrastructure.database.session import session_manager
from sprout.shared.utils.helpers import utc_now


def jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), (10, 90, 30)).save(buffer, format="JPEG")
    return buffer.getvalue()


class TestCreateListing:
    async def test_create_copies_owner_and_awards_points(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")

        assert plant["owner_id"] == "seller"
        assert plant["owner_username"] == "seller_sam"
        assert plant["is_available"] is True
        assert plant["trade_only"] is False

        profile = await client.get("/api/v1/users/me", headers=auth_headers("seller"))
        assert profile.json()["plants_listed"] == 1
        assert profile.json()["reward_points"] == 10

    async def test_sale_listing_requires_price(self, client, make_user) -> None:
        await make_user("seller", "seller_sam")
        response = await client.post(
            "/api/v1/plants",
            json={"name": "Pothos", "listing_type": "sale"},
            headers=auth_headers("seller"),
        )

        assert response.status_code == 422

    async def test_trade_listing_is_trade_only(self, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller", listing_type="trade", price=None)

        assert plant["trade_only"] is True

    async def test_zero_stock_listing_is_unavailable(self, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller", quantity=0)

        assert plant["is_available"] is False

    async def test_owner_needs_a_profile(self, client) -> None:
        response = await client.post(
            "/api/v1/plants",
            json={"name": "Pothos", "price": 5},
            headers=auth_headers("ghost"),
        )

        assert response.status_code == 404


class TestCatalog:
    async def test_pages_follow_the_cursor(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        created = [await make_listing("seller", name=f"Plant {i}") for i in range(3)]

        first = await client.get("/api/v1/plants", params={"limit": 2})
        assert first.status_code == 200
        assert len(first.json()["plants"]) == 2
        cursor = first.json()["next_cursor"]
        assert cursor

        second = await client.get("/api/v1/plants", params={"limit": 2, "cursor": cursor})
        assert len(second.json()["plants"]) == 1
        assert second.json()["next_cursor"] is None

        seen = [p["id"] for p in first.json()["plants"] + second.json()["plants"]]
        assert sorted(seen) == sorted(p["id"] for p in created)

    async def test_unavailable_listings_are_hidden(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        await make_listing("seller", name="Sold out", quantity=0)
        available = await make_listing("seller", name="In stock")

        response = await client.get("/api/v1/plants")

        assert [p["id"] for p in response.json()["plants"]] == [available["id"]]

    async def test_filter_by_tag_and_name(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        fern = await make_listing("seller", name="Boston Fern", tags=["fern"])
        await make_listing("seller", name="Snake Plant", tags=["succulent"])

        by_tag = await client.get("/api/v1/plants", params={"tag": "fern"})
        by_name = await client.get("/api/v1/plants", params={"q": "boston"})

        assert [p["id"] for p in by_tag.json()["plants"]] == [fern["id"]]
        assert [p["id"] for p in by_name.json()["plants"]] == [fern["id"]]

    async def test_malformed_cursor_is_422(self, client) -> None:
        response = await client.get("/api/v1/plants", params={"cursor": "garbage"})

        assert response.status_code == 422


class TestOwnership:
    async def test_only_owner_can_update(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        await make_user("other", "other_olly")
        plant = await make_listing("seller")

        response = await client.patch(
            f"/api/v1/plants/{plant['id']}", json={"price": 1}, headers=auth_headers("other")
        )

        assert response.status_code == 403

    async def test_quantity_update_recomputes_availability(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")

        response = await client.patch(
            f"/api/v1/plants/{plant['id']}", json={"quantity": 0}, headers=auth_headers("seller")
        )

        assert response.status_code == 200
        assert response.json()["is_available"] is False

    @pytest.mark.parametrize("field", ["name", "description", "listing_type", "quantity", "tags"])
    async def test_clearing_required_field_is_422(self, client, make_user, make_listing, field) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")

        response = await client.patch(
            f"/api/v1/plants/{plant['id']}", json={field: None}, headers=auth_headers("seller")
        )

        assert response.status_code == 422
        unchanged = (await client.get(f"/api/v1/plants/{plant['id']}")).json()
        assert unchanged[field] == plant[field]

    async def test_clearing_location_is_allowed(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller", location="Portland, OR")

        response = await client.patch(
            f"/api/v1/plants/{plant['id']}", json={"location": None}, headers=auth_headers("seller")
        )

        assert response.status_code == 200
        assert response.json()["location"] is None

    async def test_invalid_assignment_becomes_validation_error(
        self, client, make_user, make_listing, session_factory
    ) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")

        async with session_factory() as session:
            service = PlantListingService(
                listing_repository=PlantListingRepositoryImpl(session),
                user_repository=None,
                reward_service=None,
                storage=None,
                settings=get_settings(),
            )
            with pytest.raises(ValidationError) as excinfo:
                await service.update_plant_listing(plant["id"], "seller", {"quantity": -1})

        assert excinfo.value.status_code == 422
        assert excinfo.value.message == "Invalid listing update"

    async def test_delete_removes_listing_and_images(
        self, client, make_user, make_listing, storage_bucket
    ) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")
        await client.post(
            f"/api/v1/plants/{plant['id']}/images",
            files={"file": ("leaf.jpg", jpeg_bytes(), "image/jpeg")},
            headers=auth_headers("seller"),
        )

        response = await client.delete(f"/api/v1/plants/{plant['id']}", headers=auth_headers("seller"))

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/plants/{plant['id']}")).status_code == 404
        assert storage_bucket.objects == {}
        assert len(storage_bucket.removed) == 1


class TestImages:
    async def test_upload_appends_image_url(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")

        response = await client.post(
            f"/api/v1/plants/{plant['id']}/images",
            files={"file": ("leaf.jpg", jpeg_bytes(), "image/jpeg")},
            headers=auth_headers("seller"),
        )

        assert response.status_code == 200
        urls = response.json()["image_urls"]
        assert len(urls) == 1
        assert f"plant_images/{plant['id']}/0_leaf.jpg" in urls[0]

    async def test_delete_image(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")
        uploaded = await client.post(
            f"/api/v1/plants/{plant['id']}/images",
            files={"file": ("leaf.jpg", jpeg_bytes(), "image/jpeg")},
            headers=auth_headers("seller"),
        )
        url = uploaded.json()["image_urls"][0]

        response = await client.post(
            f"/api/v1/plants/{plant['id']}/images/delete",
            json={"image_url": url},
            headers=auth_headers("seller"),
        )

        assert response.status_code == 200
        assert response.json()["image_urls"] == []


class TestFeatured:
    async def test_feature_and_extend(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")

        first = await client.post(f"/api/v1/plants/{plant['id']}/feature", headers=auth_headers("seller"))
        second = await client.post(f"/api/v1/plants/{plant['id']}/feature", headers=auth_headers("seller"))

        assert first.status_code == 200
        assert first.json()["is_featured"] is True
        first_until = first.json()["featured_until"]
        second_until = second.json()["featured_until"]
        assert second_until > first_until

        featured = await client.get("/api/v1/plants/featured")
        assert [p["id"] for p in featured.json()["plants"]] == [plant["id"]]

    async def test_unavailable_listing_cannot_be_featured(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller", quantity=0)

        response = await client.post(f"/api/v1/plants/{plant['id']}/feature", headers=auth_headers("seller"))

        assert response.status_code == 422

    async def test_expiry_job_clears_lapsed_features(
        self, client, make_user, make_listing, session_factory, monkeypatch
    ) -> None:
        await make_user("seller", "seller_sam")
        plant = await make_listing("seller")
        await client.post(f"/api/v1/plants/{plant['id']}/feature", headers=auth_headers("seller"))

        monkeypatch.setattr(session_manager, "_session_factory", session_factory)

        assert await expire_featured(now=utc_now() + timedelta(days=1)) == 0
        assert await expire_featured(now=utc_now() + timedelta(days=8)) == 1

        listing = await client.get(f"/api/v1/plants/{plant['id']}")
        assert listing.json()["is_featured"] is False
        assert listing.json()["featured_until"] is None
