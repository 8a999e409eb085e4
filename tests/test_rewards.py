"""
Tests for reward points, tiers and the points history.
"""

import pytest

from conftest import auth_headers
from sprout.modules.rewards.domain.models.reward import get_tier_info


class TestTierLadder:
    def test_new_member_is_a_sproutling(self) -> None:
        info = get_tier_info(0)

        assert info.current_tier.name == "Sproutling"
        assert info.next_tier.name == "Seedling"
        assert info.progress == 0
        assert info.points_for_next_tier == 100

    @pytest.mark.parametrize(
        "points, tier, progress, remaining",
        [
            (99, "Sproutling", 99, 1),
            (100, "Seedling", 0, 150),
            (150, "Seedling", 33, 100),
            (400, "Grower", 60, 100),
            (750, "Cultivator", 50, 250),
        ],
    )
    def test_progress_between_thresholds(self, points, tier, progress, remaining) -> None:
        info = get_tier_info(points)

        assert info.current_tier.name == tier
        assert info.progress == progress
        assert info.points_for_next_tier == remaining

    @pytest.mark.parametrize("points", [1000, 5000])
    def test_top_tier_is_complete(self, points) -> None:
        info = get_tier_info(points)

        assert info.current_tier.name == "Botanist"
        assert info.next_tier is None
        assert info.progress == 100
        assert info.points_for_next_tier == 0


class TestRewardsApi:
    async def test_balance_reflects_listing_bonus(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        await make_listing("seller")

        response = await client.get("/api/v1/rewards", headers=auth_headers("seller"))

        assert response.status_code == 200
        assert response.json()["reward_points"] == 10
        assert response.json()["tier"]["current_tier"]["name"] == "Sproutling"
        assert response.json()["tier"]["progress"] == 10

    async def test_redeem_and_history(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        await make_listing("seller")

        redeemed = await client.post(
            "/api/v1/rewards/redeem",
            json={"points": 4, "description": "Seed packet"},
            headers=auth_headers("seller"),
        )
        assert redeemed.status_code == 200
        assert redeemed.json()["reward_points"] == 6

        history = (
            await client.get("/api/v1/rewards/transactions", headers=auth_headers("seller"))
        ).json()["transactions"]
        assert [(t["type"], t["points"]) for t in history] == [("spend", 4), ("earn", 10)]

        latest = (
            await client.get("/api/v1/rewards/transactions", params={"limit": 1}, headers=auth_headers("seller"))
        ).json()["transactions"]
        assert len(latest) == 1

    async def test_overspending_is_rejected(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")

        response = await client.post(
            "/api/v1/rewards/redeem",
            json={"points": 50, "description": "Too much"},
            headers=auth_headers("buyer"),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INSUFFICIENT_POINTS"

        balance = await client.get("/api/v1/rewards", headers=auth_headers("buyer"))
        assert balance.json()["reward_points"] == 0

    async def test_non_positive_amount_is_422(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")

        response = await client.post(
            "/api/v1/rewards/redeem",
            json={"points": 0, "description": "Nothing"},
            headers=auth_headers("buyer"),
        )

        assert response.status_code == 422

    async def test_tier_endpoint(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")

        response = await client.get("/api/v1/rewards/tier", headers=auth_headers("buyer"))

        assert response.json()["next_tier"] == {"name": "Seedling", "min_points": 100}
