"""Shared fixtures: an isolated in-memory database per test and an API client bound to it."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import security
from app.db import get_db, make_engine
from app.main import create_app
from app.models import Base


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Lowest bcrypt cost keeps the suite fast."""
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    """Session for calling the data-access layer directly."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(session_factory):
    app = create_app(init_database=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register an account through the API; returns (user, token)."""

    def _register(username: str, email: str = None, password: str = "secret1", **extra):
        payload = {
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
            **extra,
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], body["token"]

    return _register


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
