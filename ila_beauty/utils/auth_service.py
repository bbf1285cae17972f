import logging
from datetime import datetime

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from ila_beauty.config.constants import (
    USERS,
    LOGIN_MAX_ATTEMPTS,
    LOGIN_WINDOW_SECONDS,
    REGISTER_MAX_ATTEMPTS,
    REGISTER_WINDOW_SECONDS,
)
from ila_beauty.config.env import ADMIN_EMAIL, ADMIN_PASSWORD
from ila_beauty.models.user import UserRole, UserInDB
from ila_beauty.utils.audit import log_audit
from ila_beauty.utils.guards import new_id
from ila_beauty.utils.hash import hash_password, verify_password
from ila_beauty.utils.rate_limit import rate_limit
from ila_beauty.utils.resellers import initial_account_state
from ila_beauty.utils.sessions import open_session, close_session
from ila_beauty.utils.validators import normalize_email

logger = logging.getLogger(__name__)

# ==============================
# Register
# ==============================

async def register_user(db, email: str, password: str, role: UserRole) -> dict:
    """
    Create an account. Customers are approved and signed in at once;
    resellers are stored pending approval and get no session.
    """
    if role == UserRole.ADMIN:
        raise HTTPException(422, "Admin accounts cannot be self-registered")

    email = normalize_email(email)

    await rate_limit(
        db=db,
        key=f"register:{email}",
        max_requests=REGISTER_MAX_ATTEMPTS,
        window_seconds=REGISTER_WINDOW_SECONDS,
    )

    if await db.find_one(USERS, {"email": email}):
        raise HTTPException(status.HTTP_409_CONFLICT, "Email already registered")

    now = datetime.utcnow()
    user = {
        "id": new_id(),
        "email": email,
        "password_hash": hash_password(password),
        "role": UserRole(role).value,
        **initial_account_state(role),
        "created_at": now,
        "updated_at": now,
    }
    UserInDB.model_validate(user)

    try:
        user = await db.put(USERS, user["id"], user)
    except DuplicateKeyError:
        raise HTTPException(status.HTTP_409_CONFLICT, "Email already registered")

    await log_audit(
        db,
        actor_id=user["id"],
        actor_role=user["role"],
        action="USER_REGISTERED",
        metadata={"email": email},
    )

    if role == UserRole.RESELLER:
        return {"user": user, "session": None}

    session = await open_session(db, user)
    return {"user": user, "session": session}


# ==============================
# Login
# ==============================

async def authenticate(db, email: str, password: str) -> dict:
    email = normalize_email(email)

    await rate_limit(
        db=db,
        key=f"login:{email}",
        max_requests=LOGIN_MAX_ATTEMPTS,
        window_seconds=LOGIN_WINDOW_SECONDS,
    )

    user = await db.find_one(USERS, {"email": email})
    if not user:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "User not found")

    if not verify_password(password, user.get("password_hash")):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")

    if user["role"] == UserRole.RESELLER.value and not user.get("approved"):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Account pending approval")

    return user


async def login_user(db, email: str, password: str) -> dict:
    user = await authenticate(db, email, password)
    session = await open_session(db, user)

    await log_audit(
        db,
        actor_id=user["id"],
        actor_role=user["role"],
        action="USER_LOGGED_IN",
    )

    return {"user": user, "session": session}


async def login_admin(db, email: str, password: str) -> dict:
    try:
        user = await authenticate(db, email, password)
    except HTTPException as e:
        if e.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
            raise
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid admin credentials")

    if user["role"] != UserRole.ADMIN.value:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid admin credentials")

    session = await open_session(db, user)

    await log_audit(
        db,
        actor_id=user["id"],
        actor_role="admin",
        action="ADMIN_LOGGED_IN",
    )

    return {"user": user, "session": session}


# ==============================
# Logout
# ==============================

async def logout_session(db, session_id: str | None, user_id: str | None = None) -> bool:
    if not session_id:
        return False

    closed = await close_session(db, session_id)
    if closed:
        await log_audit(db, actor_id=user_id, actor_role=None, action="USER_LOGGED_OUT")
    return closed


# ==============================
# Admin account seed
# ==============================

async def ensure_admin_account(db, email: str | None = None, password: str | None = None) -> dict | None:
    email = email or ADMIN_EMAIL
    password = password or ADMIN_PASSWORD

    if not email or not password:
        logger.warning("ADMIN_PASSWORD not set; admin account not seeded")
        return None

    email = normalize_email(email)
    existing = await db.find_one(USERS, {"email": email})

    if existing:
        if existing["role"] != UserRole.ADMIN.value:
            logger.error("ADMIN_EMAIL %s belongs to a %s account", email, existing["role"])
            raise RuntimeError("ADMIN_EMAIL is already used by a non-admin account")
        return existing

    now = datetime.utcnow()
    admin = {
        "id": new_id(),
        "email": email,
        "password_hash": hash_password(password),
        "role": UserRole.ADMIN.value,
        "approved": True,
        "reseller_stage": None,
        "created_at": now,
        "updated_at": now,
    }
    admin = await db.put(USERS, admin["id"], admin)
    logger.info("Seeded admin account %s", email)
    return admin
