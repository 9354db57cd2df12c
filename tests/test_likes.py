"""Tests for like membership and the likes_count counter."""

import pytest
from conftest import auth
from sqlalchemy import func

from app.models import Like, Post, User
from app.services import likes
from app.services.errors import NotFoundError


@pytest.fixture
def post_and_users(db):
    author = User(username="author", email="author@example.com", password="x")
    fans = [User(username=f"fan{i}", email=f"fan{i}@example.com", password="x") for i in range(3)]
    db.add_all([author, *fans])
    db.flush()
    post = Post(user_id=author.id, content="like me")
    db.add(post)
    db.flush()
    return post, fans


def stored_count(db, post_id):
    return db.query(func.count(Like.id)).filter(Like.post_id == post_id).scalar()


class TestLikeService:

    def test_like_twice_keeps_one_row(self, db, post_and_users):
        post, (fan, *_) = post_and_users

        assert likes.like_post(db, post.id, fan.id) == (True, 1)
        assert likes.like_post(db, post.id, fan.id) == (True, 1)

        assert stored_count(db, post.id) == 1
        assert db.get(Post, post.id).likes_count == 1

    def test_toggle_twice_returns_to_start(self, db, post_and_users):
        post, (fan, *_) = post_and_users

        assert likes.toggle_like(db, post.id, fan.id) == (True, 1)
        assert likes.toggle_like(db, post.id, fan.id) == (False, 0)
        assert stored_count(db, post.id) == 0

    def test_unlike_without_like_is_noop(self, db, post_and_users):
        post, (fan, *_) = post_and_users

        assert likes.unlike_post(db, post.id, fan.id) == (False, 0)

    def test_counter_tracks_mixed_operations(self, db, post_and_users):
        post, fans = post_and_users

        likes.like_post(db, post.id, fans[0].id)
        likes.toggle_like(db, post.id, fans[1].id)
        likes.toggle_like(db, post.id, fans[2].id)
        likes.unlike_post(db, post.id, fans[1].id)
        likes.toggle_like(db, post.id, fans[0].id)

        assert db.get(Post, post.id).likes_count == stored_count(db, post.id) == 1

    def test_missing_post(self, db, post_and_users):
        _, (fan, *_) = post_and_users

        with pytest.raises(NotFoundError):
            likes.toggle_like(db, 9999, fan.id)

    def test_likers_by_post_batches(self, db, post_and_users):
        post, fans = post_and_users
        likes.like_post(db, post.id, fans[0].id)
        likes.like_post(db, post.id, fans[1].id)

        grouped = likes.likers_by_post(db, [post.id, 9999])

        assert sorted(grouped[post.id]) == sorted([fans[0].id, fans[1].id])
        assert grouped[9999] == []


class TestLikeEndpoints:
    """POST/PUT/DELETE /api/posts/{id}/like"""

    @pytest.fixture
    def post_id(self, client, register):
        _, token = register("author")
        response = client.post("/api/posts", json={"content": "like me"}, headers=auth(token))
        return response.json()["post"]["id"]

    def test_toggle(self, client, register, post_id):
        _, token = register("fan")

        first = client.post(f"/api/posts/{post_id}/like", headers=auth(token))
        assert first.status_code == 200
        assert first.json() == {"message": "Post liked", "is_liked": True, "likes_count": 1}

        post = client.get(f"/api/posts/{post_id}", headers=auth(token)).json()
        assert post["is_liked"] is True
        assert post["likes_count"] == 1

        second = client.post(f"/api/posts/{post_id}/like", headers=auth(token))
        assert second.json() == {"message": "Post unliked", "is_liked": False, "likes_count": 0}

    def test_put_and_delete_are_idempotent(self, client, register, post_id):
        _, token = register("fan")

        for _ in range(2):
            response = client.put(f"/api/posts/{post_id}/like", headers=auth(token))
            assert response.json()["likes_count"] == 1

        for _ in range(2):
            response = client.delete(f"/api/posts/{post_id}/like", headers=auth(token))
            assert response.json()["likes_count"] == 0
            assert response.json()["is_liked"] is False

    def test_like_missing_post(self, client, register):
        _, token = register("fan")

        response = client.post("/api/posts/4242/like", headers=auth(token))

        assert response.status_code == 404
        assert response.json()["message"] == "Post not found"

    def test_like_requires_token(self, client, post_id):
        response = client.post(f"/api/posts/{post_id}/like")

        assert response.status_code == 401
