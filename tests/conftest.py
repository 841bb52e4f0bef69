import os
import uuid

# must be set before planora.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite:///./planora_test.db")

import pytest
from fastapi.testclient import TestClient
from planora.main import app
from planora.database import SessionLocal, Base, engine


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def signup(client, password="SecurePass123!"):
    """Register and log in a fresh user; returns (token, user_id)."""
    email = f"user_{uuid.uuid4().hex[:8]}@example.com"
    r = client.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 200
    user_id = r.json()["id"]
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return r.json()["token"], user_id


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
