from datetime import datetime, timedelta
from fastapi import HTTPException

from ila_beauty.config.constants import RATE_LIMITS


async def rate_limit(
    db,
    key: str,
    max_requests: int,
    window_seconds: int,
):
    now = datetime.utcnow()
    window_start = now - timedelta(seconds=window_seconds)

    record = await db.get(RATE_LIMITS, key)

    if not record or record["window_started_at"] < window_start:
        record = {"count": 0, "window_started_at": now}

    if record["count"] >= max_requests:
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please try again later.",
        )

    record["count"] += 1
    await db.put(RATE_LIMITS, key, record)
