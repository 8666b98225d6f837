# tests/conftest.py
"""Shared fixtures: in-memory SQLite database, API test client, signed-up players."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before cybertaxi.config is imported
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cybertaxi.database import create_tables, get_db
from cybertaxi.main import app


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, username, password="secret1", email=None, bank_balance=None):
    body = {"username": username, "email": email or f"{username}@cybertaxi.test", "password": password}
    if bank_balance is not None:
        body["bank_balance"] = bank_balance
    resp = client.post("/api/auth/signup", json=body)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = auth_headers(data["token"])
    return data


@pytest.fixture
def alice(client):
    return signup(client, "alice", bank_balance=100000)


@pytest.fixture
def bob(client):
    return signup(client, "bob", bank_balance=100000)
