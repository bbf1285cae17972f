import asyncio
import logging
from datetime import datetime, timedelta

from ila_beauty.config.constants import AUDIT_LOGS, AUDIT_RETENTION_DAYS
from ila_beauty.database import get_db

CHECK_INTERVAL_SECONDS = 60 * 60  # hourly
logger = logging.getLogger(__name__)


async def purge_old_audit_logs(db, now: datetime | None = None) -> int:
    cutoff = (now or datetime.utcnow()) - timedelta(days=AUDIT_RETENTION_DAYS)
    return await db.delete_many(AUDIT_LOGS, {"created_at": {"$lt": cutoff}})


async def audit_cleanup_worker():
    db = get_db()

    while True:
        try:
            removed = await purge_old_audit_logs(db)
            if removed:
                logger.info("AUDIT_CLEANUP removed=%s", removed)
        except Exception:
            logger.exception("AUDIT_CLEANUP_ERROR")

        await asyncio.sleep(CHECK_INTERVAL_SECONDS)
