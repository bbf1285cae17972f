import asyncio
from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from ila_beauty.config.constants import AUDIT_LOGS, RATE_LIMITS, SESSIONS
from ila_beauty.store import MemoryStore
from ila_beauty.utils.guards import assert_valid_user_state, parse_id
from ila_beauty.utils.hash import hash_password, verify_password
from ila_beauty.utils.jwt import create_access_token, decode_token
from ila_beauty.utils.rate_limit import rate_limit
from ila_beauty.utils.resellers import access_state, initial_account_state
from ila_beauty.utils.sessions import open_session, load_session, purge_expired_sessions
from ila_beauty.models.user import UserRole
from ila_beauty.workers.audit_cleanup_worker import purge_old_audit_logs


def run(coro):
    return asyncio.run(coro)


def test_hash_and_verify():
    hashed = hash_password("rose-water")
    assert verify_password("rose-water", hashed)
    assert not verify_password("rose-Water", hashed)
    assert not verify_password("rose-water", "not-a-bcrypt-hash")
    assert not verify_password("rose-water", None)
    assert not verify_password("x" * 100, hashed)


def test_hash_rejects_bad_passwords():
    with pytest.raises(HTTPException):
        hash_password("short")
    with pytest.raises(HTTPException):
        hash_password("é" * 40)  # 80 bytes


def test_token_round_trip_and_tamper():
    token = create_access_token({"sub": "u1", "sid": "s1"})
    assert decode_token(token)["sub"] == "u1"

    with pytest.raises(HTTPException) as exc:
        decode_token(jwt.encode({"sub": "u1", "sid": "s1"}, "someone-elses-secret", algorithm="HS256"))
    assert exc.value.status_code == 401


def test_expired_token_rejected():
    token = create_access_token({"sub": "u1"}, expires_at=datetime.utcnow() - timedelta(minutes=1))
    with pytest.raises(HTTPException):
        decode_token(token)


def test_initial_account_state():
    assert initial_account_state(UserRole.CUSTOMER) == {"approved": True, "reseller_stage": None}
    assert initial_account_state(UserRole.RESELLER) == {"approved": False, "reseller_stage": "brown"}


def test_access_state():
    pending = {"role": "reseller", "approved": False, "reseller_stage": "silver"}
    assert access_state(pending) == {
        "status": "pending",
        "can_login": False,
        "is_admin": False,
        "discount_percent": 0,
    }

    approved = dict(pending, approved=True)
    assert access_state(approved)["discount_percent"] == 15
    assert access_state(approved)["can_login"] is True

    customer = {"role": "customer", "approved": True, "reseller_stage": None}
    assert access_state(customer)["status"] == "active"
    assert access_state(customer)["discount_percent"] == 0


def test_user_state_guard():
    assert_valid_user_state({"role": "reseller", "reseller_stage": "gold"})
    assert_valid_user_state({"role": "customer", "reseller_stage": None})

    with pytest.raises(HTTPException):
        assert_valid_user_state({"role": "reseller", "reseller_stage": None})
    with pytest.raises(HTTPException):
        assert_valid_user_state({"role": "customer", "reseller_stage": "gold"})


def test_parse_id():
    assert parse_id("0123456789abcdef01234567") == "0123456789abcdef01234567"
    with pytest.raises(HTTPException) as exc:
        parse_id("abc", "product_id")
    assert exc.value.detail == "Invalid product_id"


def test_rate_limit_window_resets():
    store = MemoryStore()

    for _ in range(2):
        run(rate_limit(store, "k", max_requests=2, window_seconds=60))
    with pytest.raises(HTTPException) as exc:
        run(rate_limit(store, "k", max_requests=2, window_seconds=60))
    assert exc.value.status_code == 429

    record = run(store.get(RATE_LIMITS, "k"))
    record["window_started_at"] = datetime.utcnow() - timedelta(seconds=120)
    run(store.put(RATE_LIMITS, "k", record))

    run(rate_limit(store, "k", max_requests=2, window_seconds=60))
    assert run(store.get(RATE_LIMITS, "k"))["count"] == 1


def test_expired_sessions_are_dropped():
    store = MemoryStore()
    user = {"id": "u1", "role": "customer"}

    live = decode_token(run(open_session(store, user))["access_token"])["sid"]
    stale = decode_token(run(open_session(store, user))["access_token"])["sid"]

    record = run(store.get(SESSIONS, stale))
    record["expires_at"] = datetime.utcnow() - timedelta(seconds=1)
    run(store.put(SESSIONS, stale, record))

    assert run(purge_expired_sessions(store)) == 1
    assert run(load_session(store, stale)) is None
    assert run(load_session(store, live))["user_id"] == "u1"


def test_old_audit_logs_are_purged():
    store = MemoryStore()
    now = datetime.utcnow()
    run(store.put(AUDIT_LOGS, "old", {"action": "X", "created_at": now - timedelta(days=120)}))
    run(store.put(AUDIT_LOGS, "new", {"action": "Y", "created_at": now}))

    assert run(purge_old_audit_logs(store, now)) == 1
    assert [e["id"] for e in run(store.query(AUDIT_LOGS))] == ["new"]
