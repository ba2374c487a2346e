import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_todoapp.db")

import pytest
from fastapi.testclient import TestClient

from todoapp.main import app
from todoapp.database import Base, SessionLocal, engine


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


@pytest.fixture
def signup(client):
    """Register and log in a fresh user; returns (token, user dict)."""
    def _signup(email=None, password="Pass123!"):
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        r = client.post("/auth/register", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        body = r.json()
        return body["token"], body["user"]
    return _signup