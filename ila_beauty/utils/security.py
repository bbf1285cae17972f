from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ila_beauty.config.constants import USERS
from ila_beauty.database import get_db
from ila_beauty.utils.jwt import decode_token
from ila_beauty.utils.sessions import load_session

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str):
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db=Depends(get_db),
):
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = decode_token(credentials.credentials)

    user_id = payload.get("sub")
    session_id = payload.get("sid")

    if not user_id or not session_id:
        raise _unauthorized("Invalid token payload")

    session = await load_session(db, session_id)
    if not session or session.get("user_id") != user_id:
        raise _unauthorized("Session expired. Please log in again.")

    user = await db.get(USERS, user_id)
    if not user:
        raise _unauthorized("User not found")

    if user.get("role") == "reseller" and not user.get("approved"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account pending approval",
        )

    return {"user": user, "session": session}


async def get_current_user(context=Depends(get_auth_context)):
    return context["user"]


def require_role(*roles: str):
    async def checker(user=Depends(get_current_user)):
        if user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return checker


get_current_admin = require_role("admin")
