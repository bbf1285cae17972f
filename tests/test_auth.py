import asyncio

from conftest import auth_header, ADMIN_EMAIL, ADMIN_PASSWORD, PASSWORD
from ila_beauty.config.constants import SESSIONS, USERS


def test_customer_register_is_logged_in(register, client):
    resp = register("ana@skinmail.com")
    assert resp.status_code == 201
    data = resp.json()

    user = data["user"]
    assert user["role"] == "customer"
    assert user["approved"] is True
    assert user["reseller_stage"] is None
    assert "password_hash" not in user

    token = data["session"]["access_token"]
    me = client.get("/api/auth/me", headers=auth_header(token))
    assert me.status_code == 200
    assert me.json()["email"] == "ana@skinmail.com"
    assert me.json()["access"]["status"] == "active"


def test_reseller_register_is_pending(register, login):
    resp = register("shop@skinmail.com", role="reseller")
    assert resp.status_code == 201
    data = resp.json()

    assert data["session"] is None
    assert data["user"]["approved"] is False
    assert data["user"]["reseller_stage"] == "brown"
    assert data["user"]["access"]["status"] == "pending"
    assert "pending approval" in data["message"]

    resp = login("shop@skinmail.com")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Account pending approval"


def test_duplicate_email_rejected(register):
    assert register("ana@skinmail.com").status_code == 201

    resp = register("Ana@SkinMail.com", role="reseller")
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Email already registered"


def test_admin_role_cannot_self_register(register):
    resp = register("boss@skinmail.com", role="admin")
    assert resp.status_code == 422


def test_short_password_rejected(register):
    resp = register("ana@skinmail.com", password="123")
    assert resp.status_code == 422


def test_password_is_stored_hashed(register, store):
    register("ana@skinmail.com")

    user = asyncio.run(store.find_one(USERS, {"email": "ana@skinmail.com"}))
    assert user["password_hash"] != PASSWORD
    assert user["password_hash"].startswith("$2")


def test_login_unknown_email(login):
    resp = login("ghost@skinmail.com")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found"


def test_login_wrong_password(register, login):
    register("ana@skinmail.com")

    resp = login("ana@skinmail.com", password="not-the-password")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_returns_working_token(register, login, client):
    register("ana@skinmail.com")

    resp = login("ANA@skinmail.com")
    assert resp.status_code == 200
    token = resp.json()["session"]["access_token"]

    assert client.get("/api/auth/me", headers=auth_header(token)).status_code == 200


def test_logout_kills_session(register, client, store):
    token = register("ana@skinmail.com").json()["session"]["access_token"]
    headers = auth_header(token)

    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 200
    assert asyncio.run(store.query(SESSIONS)) == []

    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401


def test_logout_without_token_is_harmless(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200

    resp = client.post("/api/auth/logout", headers=auth_header("garbage"))
    assert resp.status_code == 200


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=auth_header("not.a.jwt")).status_code == 401


def test_admin_login_rejects_customers(register, client):
    register("ana@skinmail.com")

    resp = client.post(
        "/api/auth/admin/login",
        json={"email": "ana@skinmail.com", "password": PASSWORD},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid admin credentials"


def test_admin_login_wrong_password(admin_headers, client):
    resp = client.post(
        "/api/auth/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD + "x"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid admin credentials"


def test_admin_can_use_regular_login(admin_headers, login, client):
    resp = login(ADMIN_EMAIL, password=ADMIN_PASSWORD)
    assert resp.status_code == 200
    assert resp.json()["user"]["access"]["is_admin"] is True


def test_login_is_rate_limited(login):
    for _ in range(10):
        assert login("ghost@skinmail.com").status_code == 404

    resp = login("ghost@skinmail.com")
    assert resp.status_code == 429
