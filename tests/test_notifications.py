"""
Tests for the notification bell.
"""

import pytest

from conftest import auth_headers


@pytest.fixture
async def followed(client, make_user):
    await make_user("star", "star_s")
    await make_user("fan1", "fan_one")
    await make_user("fan2", "fan_two")
    for fan in ("fan1", "fan2"):
        response = await client.post("/api/v1/users/star/follow", headers=auth_headers(fan))
        assert response.status_code == 200


class TestNotifications:
    async def test_list_is_newest_first(self, client, followed) -> None:
        response = await client.get("/api/v1/notifications", headers=auth_headers("star"))

        body = response.json()
        assert body["unread_count"] == 2
        assert [n["type"] for n in body["notifications"]] == ["follow", "follow"]
        assert "fan_two" in body["notifications"][0]["message"]
        assert all(n["is_read"] is False for n in body["notifications"])

    async def test_limit(self, client, followed) -> None:
        response = await client.get("/api/v1/notifications", params={"limit": 1}, headers=auth_headers("star"))

        assert len(response.json()["notifications"]) == 1
        assert response.json()["unread_count"] == 2

    async def test_mark_read(self, client, followed) -> None:
        first = await client.post("/api/v1/notifications/read", headers=auth_headers("star"))
        second = await client.post("/api/v1/notifications/read", headers=auth_headers("star"))

        assert first.json() == {"updated": 2}
        assert second.json() == {"updated": 0}

        count = await client.get("/api/v1/notifications/unread-count", headers=auth_headers("star"))
        assert count.json() == {"unread_count": 0}

    async def test_notifications_are_private(self, client, followed) -> None:
        response = await client.get("/api/v1/notifications", headers=auth_headers("fan1"))

        assert response.json() == {"notifications": [], "unread_count": 0}

    async def test_requires_authentication(self, client) -> None:
        response = await client.get("/api/v1/notifications")

        assert response.status_code == 401
