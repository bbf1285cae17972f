from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from fastapi import HTTPException

from ila_beauty.database import get_db
from ila_beauty.models.user import UserCreate, UserLogin, UserRole
from ila_beauty.utils.auth_service import (
    register_user,
    login_user,
    login_admin,
    logout_session,
)
from ila_beauty.utils.jwt import decode_token
from ila_beauty.utils.security import security, get_current_user
from ila_beauty.utils.serializers import serialize_user, serialize_session

router = APIRouter(prefix="/auth", tags=["Auth"])

# ======================
# Register
# ======================

@router.post("/register", status_code=201)
async def register(data: UserCreate, db=Depends(get_db)):
    result = await register_user(db, data.email, data.password, data.role)

    if data.role == UserRole.RESELLER:
        message = "Your reseller account has been created and is pending approval."
    else:
        message = "Your account has been created and you are now logged in."

    return {
        "message": message,
        "user": serialize_user(result["user"]),
        "session": serialize_session(result["session"]),
    }

# ======================
# Login
# ======================

@router.post("/login")
async def login(data: UserLogin, db=Depends(get_db)):
    result = await login_user(db, data.email, data.password)
    user = result["user"]

    return {
        "message": "Welcome back reseller!" if user["role"] == UserRole.RESELLER.value else "Welcome back!",
        "user": serialize_user(user),
        "session": serialize_session(result["session"]),
    }


@router.post("/admin/login")
async def admin_login(data: UserLogin, db=Depends(get_db)):
    result = await login_admin(db, data.email, data.password)

    return {
        "message": "Welcome to Admin Dashboard",
        "user": serialize_user(result["user"]),
        "session": serialize_session(result["session"]),
    }

# ======================
# Logout
# ======================

@router.post("/logout")
async def logout(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db=Depends(get_db),
):
    # logout never fails: a missing or dead token is already logged out
    session_id = user_id = None
    if credentials is not None:
        try:
            payload = decode_token(credentials.credentials)
            session_id = payload.get("sid")
            user_id = payload.get("sub")
        except HTTPException:
            pass

    await logout_session(db, session_id, user_id)
    return {"message": "You have been logged out successfully."}

# ======================
# Current User
# ======================

@router.get("/me")
async def me(user=Depends(get_current_user)):
    return serialize_user(user)
