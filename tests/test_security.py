"""Tests for password hashing and token handling."""

from datetime import timedelta

import jwt
import pytest

from app.config import JWT_ALGORITHM, JWT_SECRET
from app.security import create_access_token, decode_access_token, hash_password, verify_password
from app.services.errors import AuthenticationError


class TestPasswords:

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("secret1")

        assert hashed != "secret1"
        assert verify_password("secret1", hashed)
        assert not verify_password("secret2", hashed)

    def test_same_password_hashes_differently(self):
        assert hash_password("secret1") != hash_password("secret1")

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False

    def test_only_first_72_bytes_count(self):
        hashed = hash_password("a" * 72 + "tail")

        assert verify_password("a" * 72 + "different", hashed)


class TestTokens:

    def test_round_trip(self):
        token = create_access_token(42)

        assert decode_access_token(token) == 42

    def test_expired(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-1))

        with pytest.raises(AuthenticationError, match="Token has expired"):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "42"}, "another-secret", algorithm=JWT_ALGORITHM)

        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_access_token(token)

    def test_non_numeric_subject(self):
        token = jwt.encode({"sub": "alice"}, JWT_SECRET, algorithm=JWT_ALGORITHM)

        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("definitely.not.a-token")

    def test_subject_out_of_id_range(self):
        token = jwt.encode({"sub": str(10**20)}, JWT_SECRET, algorithm=JWT_ALGORITHM)

        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_access_token(token)

    def test_out_of_range_subject_reads_anonymously(self, client):
        token = jwt.encode({"sub": str(10**20)}, JWT_SECRET, algorithm=JWT_ALGORITHM)
        headers = {"Authorization": f"Bearer {token}"}

        assert client.get("/api/posts", headers=headers).status_code == 200
        assert client.post("/api/posts", json={"content": "hi"}, headers=headers).status_code == 401
