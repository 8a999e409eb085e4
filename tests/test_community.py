"""
Tests for forums, posts, votes and comments.
"""

import pytest

from conftest import auth_headers
from sprout.modules.community.domain.models.forum import Post, VoteType


@pytest.fixture
async def forum(client, make_user):
    await make_user("creator", "creator_cy")
    await make_user("member", "member_mo")
    response = await client.post(
        "/api/v1/forums",
        json={"name": "Rare Aroids", "description": "Variegated everything, trades welcome"},
        headers=auth_headers("creator"),
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def post(client, forum):
    response = await client.post(
        f"/api/v1/forums/{forum['id']}/posts",
        json={"title": "My first cutting", "content": "Rooted in water in two weeks."},
        headers=auth_headers("creator"),
    )
    assert response.status_code == 201, response.text
    return response.json()


def vote_on(post: Post, user_id: str, vote: VoteType) -> Post:
    post.toggle_vote(user_id, vote)
    return post


class TestVoteToggle:
    def make_post(self) -> Post:
        return Post(forum_id="f", author_id="a", author_username="author", title="t", content="c")

    def test_first_vote_is_recorded(self) -> None:
        post = vote_on(self.make_post(), "u1", VoteType.UPVOTE)

        assert post.upvotes == ["u1"]
        assert post.score == 1

    def test_same_vote_twice_removes_it(self) -> None:
        post = vote_on(vote_on(self.make_post(), "u1", VoteType.UPVOTE), "u1", VoteType.UPVOTE)

        assert post.upvotes == []
        assert post.downvotes == []

    def test_opposite_vote_moves_it(self) -> None:
        post = vote_on(vote_on(self.make_post(), "u1", VoteType.UPVOTE), "u1", VoteType.DOWNVOTE)

        assert post.upvotes == []
        assert post.downvotes == ["u1"]
        assert post.score == -1

    def test_votes_of_other_users_are_kept(self) -> None:
        post = self.make_post()
        vote_on(post, "u1", VoteType.UPVOTE)
        vote_on(post, "u2", VoteType.DOWNVOTE)
        vote_on(post, "u2", VoteType.UPVOTE)

        assert post.upvotes == ["u1", "u2"]
        assert post.downvotes == []


class TestForums:
    async def test_creator_is_moderator_and_member(self, forum) -> None:
        assert forum["creator_id"] == "creator"
        assert forum["moderators"] == ["creator"]
        assert forum["member_count"] == 1

    async def test_join_and_leave(self, client, forum) -> None:
        joined = await client.post(f"/api/v1/forums/{forum['id']}/join", headers=auth_headers("member"))
        again = await client.post(f"/api/v1/forums/{forum['id']}/join", headers=auth_headers("member"))
        assert joined.json()["member_count"] == 2
        assert again.json()["member_count"] == 2

        left = await client.post(f"/api/v1/forums/{forum['id']}/leave", headers=auth_headers("member"))
        assert left.json()["member_count"] == 1

    async def test_creator_cannot_leave(self, client, forum) -> None:
        response = await client.post(f"/api/v1/forums/{forum['id']}/leave", headers=auth_headers("creator"))

        assert response.status_code == 422

    async def test_moderators_by_username(self, client, forum) -> None:
        added = await client.post(
            f"/api/v1/forums/{forum['id']}/moderators",
            json={"username": "member_mo"},
            headers=auth_headers("creator"),
        )
        assert added.status_code == 200
        assert added.json()["moderators"] == ["creator", "member"]

        listed = await client.get(f"/api/v1/forums/{forum['id']}/moderators")
        assert sorted(m["username"] for m in listed.json()["moderators"]) == ["creator_cy", "member_mo"]

    async def test_members_cannot_change_settings(self, client, forum) -> None:
        response = await client.patch(
            f"/api/v1/forums/{forum['id']}",
            json={"name": "Taken over"},
            headers=auth_headers("member"),
        )

        assert response.status_code == 403

    async def test_short_description_is_422(self, client, make_user) -> None:
        await make_user("creator", "creator_cy")
        response = await client.post(
            "/api/v1/forums", json={"name": "Ferns", "description": "short"}, headers=auth_headers("creator")
        )

        assert response.status_code == 422


    async def test_padded_short_name_is_422(self, client, make_user) -> None:
        await make_user("creator", "creator_cy")
        response = await client.post(
            "/api/v1/forums",
            json={"name": "  ab  ", "description": "Long enough description"},
            headers=auth_headers("creator"),
        )

        assert response.status_code == 422

    async def test_names_are_stored_stripped(self, client, make_user) -> None:
        await make_user("creator", "creator_cy")
        response = await client.post(
            "/api/v1/forums",
            json={"name": "  Ferns  ", "description": "  Fronds, spores and rhizomes  "},
            headers=auth_headers("creator"),
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Ferns"
        assert response.json()["description"] == "Fronds, spores and rhizomes"


class TestPosts:
    async def test_post_awards_points(self, client, post) -> None:
        profile = (await client.get("/api/v1/users/me", headers=auth_headers("creator"))).json()

        assert post["author_username"] == "creator_cy"
        assert profile["reward_points"] == 5

    async def test_vote_endpoint_toggles(self, client, forum, post) -> None:
        url = f"/api/v1/forums/{forum['id']}/posts/{post['id']}/vote"

        up = await client.post(url, json={"vote": "upvote"}, headers=auth_headers("member"))
        assert up.json()["upvotes"] == ["member"]
        assert up.json()["score"] == 1

        down = await client.post(url, json={"vote": "downvote"}, headers=auth_headers("member"))
        assert down.json()["upvotes"] == []
        assert down.json()["downvotes"] == ["member"]

        cleared = await client.post(url, json={"vote": "downvote"}, headers=auth_headers("member"))
        assert cleared.json()["score"] == 0

    async def test_invalid_vote_is_422(self, client, forum, post) -> None:
        response = await client.post(
            f"/api/v1/forums/{forum['id']}/posts/{post['id']}/vote",
            json={"vote": "sideways"},
            headers=auth_headers("member"),
        )

        assert response.status_code == 422

    @pytest.mark.parametrize(
        "body",
        [
            {"title": "     ", "content": "Rooted in water."},
            {"title": "My first cutting", "content": "   "},
        ],
    )
    async def test_blank_post_is_422(self, client, forum, body) -> None:
        response = await client.post(
            f"/api/v1/forums/{forum['id']}/posts", json=body, headers=auth_headers("creator")
        )

        assert response.status_code == 422
        posts = (await client.get(f"/api/v1/forums/{forum['id']}/posts")).json()["posts"]
        assert posts == []

    async def test_only_author_or_moderator_deletes(self, client, forum, post) -> None:
        url = f"/api/v1/forums/{forum['id']}/posts/{post['id']}"

        denied = await client.delete(url, headers=auth_headers("member"))
        assert denied.status_code == 403

        allowed = await client.delete(url, headers=auth_headers("creator"))
        assert allowed.status_code == 204
        assert (await client.get(url)).status_code == 404

    async def test_post_from_another_forum_is_404(self, client, forum, post) -> None:
        other = await client.post(
            "/api/v1/forums",
            json={"name": "Cacti Corner", "description": "Spiky friends and their keepers"},
            headers=auth_headers("member"),
        )

        response = await client.get(f"/api/v1/forums/{other.json()['id']}/posts/{post['id']}")

        assert response.status_code == 404


class TestComments:
    async def test_comment_notifies_author_and_counts(self, client, forum, post) -> None:
        response = await client.post(
            f"/api/v1/forums/{forum['id']}/posts/{post['id']}/comments",
            json={"text": "Great roots!"},
            headers=auth_headers("member"),
        )

        assert response.status_code == 201
        assert response.json()["author_username"] == "member_mo"

        refreshed = (await client.get(f"/api/v1/forums/{forum['id']}/posts/{post['id']}")).json()
        assert refreshed["comment_count"] == 1

        comments = (
            await client.get(f"/api/v1/forums/{forum['id']}/posts/{post['id']}/comments")
        ).json()["comments"]
        assert [c["text"] for c in comments] == ["Great roots!"]

        notes = (await client.get("/api/v1/notifications", headers=auth_headers("creator"))).json()
        assert notes["notifications"][0]["type"] == "comment"

        member = (await client.get("/api/v1/users/me", headers=auth_headers("member"))).json()
        assert member["reward_points"] == 2

    async def test_blank_comment_is_422(self, client, forum, post) -> None:
        response = await client.post(
            f"/api/v1/forums/{forum['id']}/posts/{post['id']}/comments",
            json={"text": "   "},
            headers=auth_headers("member"),
        )

        assert response.status_code == 422

    async def test_own_comment_does_not_notify(self, client, forum, post) -> None:
        await client.post(
            f"/api/v1/forums/{forum['id']}/posts/{post['id']}/comments",
            json={"text": "Update: new leaf"},
            headers=auth_headers("creator"),
        )

        notes = (await client.get("/api/v1/notifications", headers=auth_headers("creator"))).json()
        assert notes["notifications"] == []
