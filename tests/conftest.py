import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.auth import User, get_current_user
from app.core.database import Base
from app.main import app

ADMIN = User(user_id="admin-1", email="admin@example.com", role="admin")


class AuthState:
    """Who the test client is signed in as; swap `user` mid-test to change roles."""

    def __init__(self):
        self.user = ADMIN

    def as_tenant(self, user_id: str, email: str = "tenant@example.com"):
        self.user = User(user_id=user_id, email=email, role="tenant")

    def as_admin(self):
        self.user = ADMIN


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def client(db_session, auth):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: auth.user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def room(client):
    r = client.post("/rooms", json={"room_number": "101", "type": "single", "rent_amount": 5000})
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def tenant(client, room):
    r = client.post(
        "/tenants",
        json={
            "user_id": "tenant-user-1",
            "room_id": room["id"],
            "name": "Maria Santos",
            "contact": "09171234567",
            "start_date": "2024-01-15",
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def march_setup(client, tenant, room):
    """Rates and meter readings for February and March 2024 on room 101."""
    for month, reading in (("2024-02", 1000), ("2024-03", 1100)):
        r = client.post(
            "/billing/rates",
            json={"month_year": month, "electricity_rate": 12.5, "water_rate": 200, "wifi_rate": 150},
        )
        assert r.status_code == 201, r.text
        r = client.post("/billing/readings", json={"room_id": room["id"], "month_year": month, "reading": reading})
        assert r.status_code == 201, r.text
    return {"room": room, "tenant": tenant}
