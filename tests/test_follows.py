"""Tests for the follow graph."""

import pytest
from conftest import auth

from app.models import Follow, User
from app.services import follows
from app.services.errors import NotFoundError, ValidationError


@pytest.fixture
def pair(db):
    alice = User(username="alice", email="alice@example.com", password="x")
    bob = User(username="bob", email="bob@example.com", password="x")
    db.add_all([alice, bob])
    db.flush()
    return alice, bob


class TestFollowService:

    def test_toggle_flips_edge(self, db, pair):
        alice, bob = pair

        assert follows.toggle_follow(db, alice.id, bob.id) is True
        assert follows.is_following(db, alice.id, bob.id)
        assert not follows.is_following(db, bob.id, alice.id)

        assert follows.toggle_follow(db, alice.id, bob.id) is False
        assert not follows.is_following(db, alice.id, bob.id)

    def test_follow_is_idempotent(self, db, pair):
        alice, bob = pair

        assert follows.follow_user(db, alice.id, bob.id) is True
        assert follows.follow_user(db, alice.id, bob.id) is False
        assert db.query(Follow).count() == 1

    def test_unfollow_without_edge(self, db, pair):
        alice, bob = pair

        assert follows.unfollow_user(db, alice.id, bob.id) is False

    def test_cannot_follow_self(self, db, pair):
        alice, _ = pair

        with pytest.raises(ValidationError, match="Cannot follow yourself"):
            follows.toggle_follow(db, alice.id, alice.id)

    def test_cannot_follow_missing_user(self, db, pair):
        alice, _ = pair

        with pytest.raises(NotFoundError):
            follows.follow_user(db, alice.id, 9999)

    def test_followers_and_following_lists(self, db, pair):
        alice, bob = pair
        carol = User(username="carol", email="carol@example.com", password="x")
        db.add(carol)
        db.flush()
        follows.follow_user(db, alice.id, bob.id)
        follows.follow_user(db, carol.id, bob.id)

        followers = {u["username"] for u in follows.get_followers(db, bob.id)}
        following = [u["username"] for u in follows.get_following(db, alice.id)]

        assert followers == {"alice", "carol"}
        assert following == ["bob"]
        assert follows.get_followers(db, alice.id) == []


class TestFollowEndpoints:
    """/api/users/follow, /followers, /following, /is-following"""

    def test_follow_then_unfollow(self, client, register):
        _, alice_token = register("alice")
        bob, _ = register("bob")

        response = client.post(f"/api/users/follow/{bob['id']}", headers=auth(alice_token))
        assert response.status_code == 200
        assert response.json() == {"message": "Followed successfully", "is_following": True}

        status = client.get(f"/api/users/is-following/{bob['id']}", headers=auth(alice_token))
        assert status.json() == {"is_following": True}

        response = client.post(f"/api/users/follow/{bob['id']}", headers=auth(alice_token))
        assert response.json() == {"message": "Unfollowed successfully", "is_following": False}

    def test_self_follow_is_400(self, client, register):
        alice, token = register("alice")

        response = client.post(f"/api/users/follow/{alice['id']}", headers=auth(token))

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot follow yourself"

    def test_follow_missing_user_is_404(self, client, register):
        _, token = register("alice")

        response = client.post("/api/users/follow/999", headers=auth(token))

        assert response.status_code == 404

    def test_lists_and_profile_counts(self, client, register):
        alice, alice_token = register("alice")
        bob, _ = register("bob")
        client.post(f"/api/users/follow/{bob['id']}", headers=auth(alice_token))

        followers = client.get(f"/api/users/followers/{bob['id']}").json()
        following = client.get(f"/api/users/following/{alice['id']}").json()
        profile = client.get(f"/api/users/profile/{bob['id']}").json()

        assert [u["username"] for u in followers] == ["alice"]
        assert [u["username"] for u in following] == ["bob"]
        assert profile["followers_count"] == 1
        assert profile["following_count"] == 0
