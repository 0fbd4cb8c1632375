"""Pytest configuration and shared fixtures."""

import uuid

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from boxoffice.database import get_database
from boxoffice.main import app

ADMIN = {"username": "boxadmin", "email": "admin@example.com", "password": "s3cret-pass"}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    return AsyncMongoMockClient()[f"boxoffice_{uuid.uuid4().hex}"]


@pytest.fixture
def client(db) -> TestClient:
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client) -> dict:
    assert client.post("/api/admin/signup", json=ADMIN).status_code == 201
    response = client.post("/api/admin/login", json={"email": ADMIN["email"], "password": ADMIN["password"]})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def make_hall(client, admin_headers):
    def _make(**overrides):
        payload = {"hall_id": "hallA", "name": "Hall A", "capacity": 48, "type": "standard"}
        payload.update(overrides)
        response = client.post("/api/halls", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_event(client, admin_headers):
    def _make(hall_id="hallA", **overrides):
        payload = {
            "title": "Dune: Part Two",
            "event_type": "movie",
            "category": "Sci-Fi",
            "event_date": "2026-11-01",
            "event_time": "19:00",
            "hall_id": hall_id,
            "status": "active",
            "pricing": {"standardSingle": {"price": 2500, "count": 48}},
        }
        payload.update(overrides)
        response = client.post("/api/events", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def booking_payload():
    def _payload(event_id, seats, **overrides):
        payload = {
            "customerName": "Ada Obi",
            "customerEmail": "ada@example.com",
            "customerPhone": "+2348012345678",
            "eventId": event_id,
            "seats": seats,
            "paymentMethod": "cash",
        }
        payload.update(overrides)
        return payload
    return _payload
