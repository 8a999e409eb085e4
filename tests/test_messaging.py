"""
Tests for one-to-one chats between members.
"""

import pytest

from conftest import auth_headers
from sprout.modules.messaging.domain.models.chat import get_chat_document_id


@pytest.fixture
async def members(make_user):
    await make_user("alice", "alice_a")
    await make_user("bob", "bob_b")
    await make_user("carol", "carol_c")


async def open_chat(client, user: str, other: str):
    return await client.post("/api/v1/chats", json={"other_user_id": other}, headers=auth_headers(user))


class TestChatId:
    def test_id_does_not_depend_on_argument_order(self) -> None:
        assert get_chat_document_id("zeta", "alpha") == get_chat_document_id("alpha", "zeta")
        assert get_chat_document_id("zeta", "alpha") == "alpha_zeta"

    def test_ids_containing_the_separator_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            get_chat_document_id("a_b", "c")


class TestChats:
    async def test_both_members_reach_the_same_chat(self, client, members) -> None:
        first = await open_chat(client, "alice", "bob")
        second = await open_chat(client, "bob", "alice")

        assert first.status_code == 200
        assert first.json()["id"] == second.json()["id"] == "alice_bob"
        assert first.json()["last_message"] == "Chat started!"
        assert first.json()["participant_details"]["bob"]["username"] == "bob_b"

        chats = await client.get("/api/v1/chats", headers=auth_headers("bob"))
        assert [c["id"] for c in chats.json()["chats"]] == ["alice_bob"]

    async def test_cannot_chat_with_yourself(self, client, members) -> None:
        response = await open_chat(client, "alice", "alice")

        assert response.status_code == 422

    async def test_underscore_user_id_is_422(self, client, members, make_user) -> None:
        await make_user("b_c", "bee_cee")

        response = await open_chat(client, "alice", "b_c")

        assert response.status_code == 422
        assert response.json()["error"]["details"]["field"] == "other_user_id"

    async def test_unknown_member_is_404(self, client, members) -> None:
        response = await open_chat(client, "alice", "nobody")

        assert response.status_code == 404

    async def test_outsider_cannot_read(self, client, members) -> None:
        await open_chat(client, "alice", "bob")

        response = await client.get("/api/v1/chats/alice_bob/messages", headers=auth_headers("carol"))

        assert response.status_code == 403

    async def test_other_participant_profile(self, client, members) -> None:
        await open_chat(client, "alice", "bob")

        response = await client.get("/api/v1/chats/alice_bob/participant", headers=auth_headers("alice"))

        assert response.json()["user_id"] == "bob"


class TestMessages:
    async def test_send_updates_chat_and_notifies(self, client, members) -> None:
        await open_chat(client, "alice", "bob")

        sent = await client.post(
            "/api/v1/chats/alice_bob/messages",
            json={"text": "  Is the Monstera still available?  "},
            headers=auth_headers("alice"),
        )

        assert sent.status_code == 201
        assert sent.json()["text"] == "Is the Monstera still available?"
        assert sent.json()["receiver_id"] == "bob"
        assert sent.json()["read"] is False

        chat = (await client.get("/api/v1/chats/alice_bob", headers=auth_headers("bob"))).json()
        assert chat["last_message"] == "Is the Monstera still available?"

        notes = (await client.get("/api/v1/notifications", headers=auth_headers("bob"))).json()
        assert notes["notifications"][0]["type"] == "message"
        assert notes["notifications"][0]["link"] == "/messages/alice_bob"

    async def test_long_message_preview_is_truncated(self, client, members) -> None:
        await open_chat(client, "alice", "bob")

        await client.post(
            "/api/v1/chats/alice_bob/messages", json={"text": "a" * 80}, headers=auth_headers("alice")
        )

        notes = (await client.get("/api/v1/notifications", headers=auth_headers("bob"))).json()
        assert notes["notifications"][0]["message"].endswith("a" * 50 + "...")

    async def test_blank_message_is_rejected(self, client, members) -> None:
        await open_chat(client, "alice", "bob")

        response = await client.post(
            "/api/v1/chats/alice_bob/messages", json={"text": "   "}, headers=auth_headers("alice")
        )

        assert response.status_code == 422

    async def test_messages_are_oldest_first_and_can_be_polled(self, client, members) -> None:
        await open_chat(client, "alice", "bob")
        first = await client.post(
            "/api/v1/chats/alice_bob/messages", json={"text": "one"}, headers=auth_headers("alice")
        )
        await client.post("/api/v1/chats/alice_bob/messages", json={"text": "two"}, headers=auth_headers("bob"))

        everything = await client.get("/api/v1/chats/alice_bob/messages", headers=auth_headers("alice"))
        assert [m["text"] for m in everything.json()["messages"]] == ["one", "two"]

        newer = await client.get(
            "/api/v1/chats/alice_bob/messages",
            params={"since": first.json()["timestamp"]},
            headers=auth_headers("alice"),
        )
        assert [m["text"] for m in newer.json()["messages"]] == ["two"]

    async def test_mark_read_only_touches_received_messages(self, client, members) -> None:
        await open_chat(client, "alice", "bob")
        await client.post("/api/v1/chats/alice_bob/messages", json={"text": "hi"}, headers=auth_headers("alice"))
        await client.post("/api/v1/chats/alice_bob/messages", json={"text": "yo"}, headers=auth_headers("alice"))
        await client.post("/api/v1/chats/alice_bob/messages", json={"text": "hey"}, headers=auth_headers("bob"))

        response = await client.post("/api/v1/chats/alice_bob/read", headers=auth_headers("bob"))

        assert response.json() == {"updated": 2}
