import asyncio
import os

# must be set before ila_beauty.config.env is imported
os.environ["STORE_BACKEND"] = "memory"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from ila_beauty.database import get_db
from ila_beauty.main import app
from ila_beauty.store import MemoryStore
from ila_beauty.utils.auth_service import ensure_admin_account

ADMIN_EMAIL = "admin@ilasbeauty.com"
ADMIN_PASSWORD = "admin-pass-123"
PASSWORD = "glow-secret"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_db] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    def _register(email, role="customer", password=PASSWORD):
        return client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "role": role},
        )
    return _register


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        return client.post("/api/auth/login", json={"email": email, "password": password})
    return _login


@pytest.fixture
def admin_headers(client, store):
    asyncio.run(ensure_admin_account(store, ADMIN_EMAIL, ADMIN_PASSWORD))
    resp = client.post(
        "/api/auth/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    return auth_header(resp.json()["session"]["access_token"])


@pytest.fixture
def pending_reseller(register):
    resp = register("reseller@skinmail.com", role="reseller")
    assert resp.status_code == 201
    return resp.json()["user"]
