from datetime import datetime, timedelta
from fastapi import HTTPException, status
from jose import jwt, JWTError
from ila_beauty.config.env import JWT_SECRET, JWT_ALGORITHM, ACCESS_TOKEN_MINUTES


def _require_jwt_secret() -> str:
    secret = (JWT_SECRET or "").strip()
    if not secret:
        raise RuntimeError("JWT_SECRET is not configured")
    return secret


def create_access_token(payload: dict, expires_at: datetime | None = None) -> str:
    payload = payload.copy()
    now = datetime.utcnow()
    payload.update({
        "exp": expires_at or now + timedelta(minutes=ACCESS_TOKEN_MINUTES),
        "iat": now,
    })
    return jwt.encode(payload, _require_jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, _require_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
