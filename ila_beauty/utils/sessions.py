from datetime import datetime, timedelta

from ila_beauty.config.constants import SESSIONS
from ila_beauty.config.env import ACCESS_TOKEN_MINUTES
from ila_beauty.utils.guards import new_id
from ila_beauty.utils.jwt import create_access_token


async def open_session(db, user: dict) -> dict:
    """
    Persist a session for ``user`` and mint the bearer token pointing at it.
    The token is only honoured while the session record exists.
    """
    now = datetime.utcnow()
    expires_at = now + timedelta(minutes=ACCESS_TOKEN_MINUTES)
    session_id = new_id()

    await db.put(SESSIONS, session_id, {
        "user_id": user["id"],
        "role": user["role"],
        "created_at": now,
        "expires_at": expires_at,
    })

    token = create_access_token(
        {"sub": user["id"], "sid": session_id, "role": user["role"]},
        expires_at=expires_at,
    )

    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_at": expires_at,
    }


async def load_session(db, session_id: str) -> dict | None:
    session = await db.get(SESSIONS, session_id)
    if not session:
        return None

    if session["expires_at"] <= datetime.utcnow():
        await db.delete(SESSIONS, session_id)
        return None

    return session


async def close_session(db, session_id: str) -> bool:
    return await db.delete(SESSIONS, session_id)


async def revoke_user_sessions(db, user_id: str) -> int:
    return await db.delete_many(SESSIONS, {"user_id": user_id})


async def purge_expired_sessions(db) -> int:
    return await db.delete_many(SESSIONS, {"expires_at": {"$lt": datetime.utcnow()}})
