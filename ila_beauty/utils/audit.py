import logging
from datetime import datetime

from ila_beauty.config.constants import AUDIT_LOGS
from ila_beauty.utils.guards import new_id

logger = logging.getLogger(__name__)


async def log_audit(
    db,
    actor_id: str | None,
    actor_role: str | None,
    action: str,
    metadata: dict | None = None
):
    entry_id = new_id()
    await db.put(AUDIT_LOGS, entry_id, {
        "actor_id": actor_id,
        "actor_role": actor_role,
        "action": action,
        "metadata": metadata or {},
        "created_at": datetime.utcnow()
    })
    logger.info("AUDIT %s actor=%s role=%s", action, actor_id, actor_role)
