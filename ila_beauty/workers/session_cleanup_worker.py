import asyncio
import logging

from ila_beauty.database import get_db
from ila_beauty.utils.sessions import purge_expired_sessions

CHECK_INTERVAL_SECONDS = 60 * 15  # every 15 minutes
logger = logging.getLogger(__name__)


async def session_cleanup_worker():
    db = get_db()

    while True:
        try:
            removed = await purge_expired_sessions(db)
            if removed:
                logger.info("SESSION_CLEANUP removed=%s", removed)
        except Exception:
            logger.exception("SESSION_CLEANUP_ERROR")

        await asyncio.sleep(CHECK_INTERVAL_SECONDS)
