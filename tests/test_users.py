"""
Tests for member profiles: creation, authentication, wishlist and follows.
"""

import io

from PIL import Image

from conftest import auth_headers, make_token


def png_bytes(size=(32, 32)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (40, 120, 60)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestAuthentication:
    async def test_missing_token_is_rejected(self, client) -> None:
        response = await client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    async def test_token_signed_with_another_secret_is_rejected(self, client) -> None:
        token = make_token("user-1", secret="not-the-secret")
        response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    async def test_expired_token_is_rejected(self, client) -> None:
        token = make_token("user-1", expires_in=-60)
        response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    async def test_wrong_audience_is_rejected(self, client) -> None:
        token = make_token("user-1", audience="anon")
        response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestProfiles:
    async def test_create_profile_uses_token_identity(self, client) -> None:
        response = await client.post(
            "/api/v1/users/me",
            json={"username": "fern_fan"},
            headers=auth_headers("uid-fern", "fern@sprout.test"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == "uid-fern"
        assert body["email"] == "fern@sprout.test"
        assert body["reward_points"] == 0
        assert body["subscription"]["status"] == "free"
        assert body["is_pro"] is False

    async def test_second_profile_for_same_uid_conflicts(self, client, make_user) -> None:
        await make_user("uid-1", "first_name")
        response = await client.post(
            "/api/v1/users/me", json={"username": "other_name"}, headers=auth_headers("uid-1")
        )

        assert response.status_code == 409

    async def test_username_is_unique_case_insensitively(self, client, make_user) -> None:
        await make_user("uid-1", "PlantLover")
        response = await client.post(
            "/api/v1/users/me", json={"username": "plantlover"}, headers=auth_headers("uid-2")
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"

    async def test_profile_not_created_yet_is_404(self, client) -> None:
        response = await client.get("/api/v1/users/me", headers=auth_headers("nobody"))

        assert response.status_code == 404

    async def test_update_profile_fields(self, client, make_user) -> None:
        await make_user("uid-1", "monstera_mom")
        response = await client.patch(
            "/api/v1/users/me",
            json={"bio": "Aroids only", "location": "Portland"},
            headers=auth_headers("uid-1"),
        )

        assert response.status_code == 200
        assert response.json()["bio"] == "Aroids only"
        assert response.json()["location"] == "Portland"

    async def test_lookup_by_username(self, client, make_user) -> None:
        await make_user("uid-1", "cactus_carl")
        response = await client.get("/api/v1/users/by-username/cactus_carl")

        assert response.status_code == 200
        assert response.json()["user_id"] == "uid-1"
        assert "email" not in response.json()

    async def test_avatar_upload_stores_image(self, client, make_user, storage_bucket) -> None:
        await make_user("uid-1", "pic_person")
        response = await client.post(
            "/api/v1/users/me/avatar",
            files={"file": ("me.png", png_bytes(), "image/png")},
            headers=auth_headers("uid-1"),
        )

        assert response.status_code == 200
        avatar_url = response.json()["avatar_url"]
        assert "/object/public/" in avatar_url
        assert "profile_images/uid-1/" in avatar_url
        assert len(storage_bucket.objects) == 1

    async def test_avatar_upload_rejects_non_images(self, client, make_user) -> None:
        await make_user("uid-1", "pic_person")
        response = await client.post(
            "/api/v1/users/me/avatar",
            files={"file": ("notes.txt", b"just text", "text/plain")},
            headers=auth_headers("uid-1"),
        )

        assert response.status_code == 415


class TestWishlist:
    async def test_adding_twice_keeps_one_entry(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        await make_user("buyer", "buyer_bea")
        plant = await make_listing("seller")

        for _ in range(2):
            response = await client.put(
                f"/api/v1/users/me/wishlist/{plant['id']}", headers=auth_headers("buyer")
            )
            assert response.status_code == 200

        assert response.json()["favorite_plants"] == [plant["id"]]

        wishlist = await client.get("/api/v1/users/me/wishlist", headers=auth_headers("buyer"))
        assert [p["id"] for p in wishlist.json()["plants"]] == [plant["id"]]

    async def test_unknown_plant_is_404(self, client, make_user) -> None:
        await make_user("buyer", "buyer_bea")
        response = await client.put("/api/v1/users/me/wishlist/missing", headers=auth_headers("buyer"))

        assert response.status_code == 404

    async def test_remove_from_wishlist(self, client, make_user, make_listing) -> None:
        await make_user("seller", "seller_sam")
        await make_user("buyer", "buyer_bea")
        plant = await make_listing("seller")
        await client.put(f"/api/v1/users/me/wishlist/{plant['id']}", headers=auth_headers("buyer"))

        response = await client.delete(
            f"/api/v1/users/me/wishlist/{plant['id']}", headers=auth_headers("buyer")
        )

        assert response.status_code == 200
        assert response.json()["favorite_plants"] == []


class TestFollows:
    async def test_follow_updates_both_sides_and_notifies(self, client, make_user) -> None:
        await make_user("alice", "alice_a")
        await make_user("bob", "bob_b")

        response = await client.post("/api/v1/users/bob/follow", headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json()["following"] == ["bob"]

        bob = await client.get("/api/v1/users/me", headers=auth_headers("bob"))
        assert bob.json()["followers"] == ["alice"]

        notifications = await client.get("/api/v1/notifications", headers=auth_headers("bob"))
        body = notifications.json()
        assert body["unread_count"] == 1
        assert body["notifications"][0]["type"] == "follow"
        assert "alice_a" in body["notifications"][0]["message"]

    async def test_follow_is_idempotent(self, client, make_user) -> None:
        await make_user("alice", "alice_a")
        await make_user("bob", "bob_b")

        await client.post("/api/v1/users/bob/follow", headers=auth_headers("alice"))
        await client.post("/api/v1/users/bob/follow", headers=auth_headers("alice"))

        bob = await client.get("/api/v1/users/bob")
        assert bob.json()["followers_count"] == 1

    async def test_cannot_follow_yourself(self, client, make_user) -> None:
        await make_user("alice", "alice_a")
        response = await client.post("/api/v1/users/alice/follow", headers=auth_headers("alice"))

        assert response.status_code == 422

    async def test_unfollow(self, client, make_user) -> None:
        await make_user("alice", "alice_a")
        await make_user("bob", "bob_b")
        await client.post("/api/v1/users/bob/follow", headers=auth_headers("alice"))

        response = await client.delete("/api/v1/users/bob/follow", headers=auth_headers("alice"))

        assert response.json()["following"] == []
        bob = await client.get("/api/v1/users/bob")
        assert bob.json()["followers_count"] == 0
