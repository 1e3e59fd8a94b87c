import os
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-32-characters")

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.main import app
from app.clock import get_now
from app.database import Base, get_db
from app.security import create_access_token

# Fixed "now" for every request: 2023-11-14T22:13:20Z
NOW = 1_700_000_000_000
DAY_MS = 24 * 60 * 60 * 1000

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_now():
    return NOW


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_now] = override_get_now


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def auth_headers():
    token = create_access_token(subject="tech-1", email="tech@example.org")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_equipment(client, auth_headers):
    def _make(**fields):
        payload = {"name": "Infusion Pump"}
        payload.update(fields)
        resp = client.post("/api/equipment", json=payload, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_schedule(client, auth_headers):
    def _make(equipment_id, **fields):
        payload = {"equipmentId": equipment_id, "title": "Annual Check"}
        payload.update(fields)
        resp = client.post("/api/maintenance-schedules", json=payload, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_log(client, auth_headers):
    def _make(equipment_id, **fields):
        payload = {
            "equipmentId": equipment_id,
            "title": "Battery swap",
            "type": "corrective",
            "performedBy": "J. Rivera",
            "performedAt": NOW - DAY_MS,
        }
        payload.update(fields)
        resp = client.post("/api/maintenance-logs", json=payload, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make


@pytest.fixture
def make_work_order(client, auth_headers):
    def _make(equipment_id, **fields):
        payload = {"equipmentId": equipment_id, "title": "Alarm fault", "type": "repair"}
        payload.update(fields)
        resp = client.post("/api/work-orders", json=payload, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make
