"""Tests for registration, login and the bearer-token gate."""

from datetime import timedelta

from conftest import auth

from app.security import create_access_token


class TestRegistration:
    """POST /api/auth/register"""

    def test_register_returns_user_and_token(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "a@x.com", "password": "secret1"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["username"] == "alice"
        assert data["user"]["email"] == "a@x.com"
        assert data["token"]
        assert "password" not in data["user"]

    def test_duplicate_email_rejected(self, client, register):
        register("alice", email="a@x.com")

        response = client.post(
            "/api/auth/register",
            json={"username": "alice2", "email": "a@x.com", "password": "secret1"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User with this email already exists"

    def test_duplicate_username_rejected(self, client, register):
        register("alice", email="a@x.com")

        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "other@x.com", "password": "secret1"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Username already taken"

    def test_short_password_rejected(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "bob", "email": "b@x.com", "password": "123"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["message"] == "Password must be at least 6 characters long"

    def test_missing_fields_rejected(self, client):
        response = client.post("/api/auth/register", json={"username": "bob"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_malformed_email_rejected(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "bob", "email": "not-an-email", "password": "secret1"},
        )

        assert response.status_code == 400


class TestLogin:
    """POST /api/auth/login"""

    def test_login_after_register(self, client, register):
        register("alice", email="a@x.com", password="secret1")

        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["username"] == "alice"

    def test_wrong_password(self, client, register):
        register("alice", email="a@x.com", password="secret1")

        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong-pw"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "nobody@x.com", "password": "secret1"})

        assert response.status_code == 401

    def test_malformed_email_is_401(self, client):
        response = client.post("/api/auth/login", json={"email": "not-an-email", "password": "secret1"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_logout_is_stateless(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logout successful"


class TestAuthGate:
    """Protected endpoints reject bad credentials; read endpoints degrade to anonymous."""

    def test_me_with_token(self, client, register):
        user, token = register("alice")

        response = client.get("/api/auth/me", headers=auth(token))

        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_missing_token_is_401(self, client):
        response = client.post("/api/posts", json={"content": "hi"})

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["message"] == "Access token required"

    def test_garbage_token_is_401(self, client):
        response = client.post("/api/posts", json={"content": "hi"}, headers=auth("not.a.jwt"))

        assert response.status_code == 401

    def test_expired_token_is_401(self, client, register):
        user, _ = register("alice")
        expired = create_access_token(user["id"], expires_delta=timedelta(seconds=-10))

        response = client.post("/api/posts", json={"content": "hi"}, headers=auth(expired))

        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"

    def test_token_for_deleted_user_is_401(self, client, register):
        _, token = register("alice")
        assert client.delete("/api/users/me", headers=auth(token)).status_code == 200

        response = client.get("/api/auth/me", headers=auth(token))

        assert response.status_code == 401

    def test_read_endpoint_ignores_invalid_token(self, client, register):
        _, token = register("alice")
        client.post("/api/posts", json={"content": "hello"}, headers=auth(token))

        response = client.get("/api/posts", headers=auth("tampered-token"))

        assert response.status_code == 200
        posts = response.json()
        assert len(posts) == 1
        assert posts[0]["is_liked"] is False
