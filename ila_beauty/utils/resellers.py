from datetime import datetime

from fastapi import HTTPException

from ila_beauty.config.constants import (
    USERS,
    DEFAULT_RESELLER_STAGE,
    RESELLER_STAGE_DISCOUNTS,
)
from ila_beauty.models.user import UserRole, ResellerStage
from ila_beauty.utils.audit import log_audit
from ila_beauty.utils.guards import parse_id, assert_valid_user_state
from ila_beauty.utils.sessions import revoke_user_sessions


# ============================================================
# Reseller programme: approval gate and stage (discount tier).
# Every transition is an explicit admin action; nothing here
# promotes a reseller automatically.
# ============================================================


def initial_account_state(role: UserRole) -> dict:
    if role == UserRole.RESELLER:
        return {"approved": False, "reseller_stage": DEFAULT_RESELLER_STAGE}
    return {"approved": True, "reseller_stage": None}


def discount_percent(user: dict) -> int:
    if user.get("role") != UserRole.RESELLER.value or not user.get("approved"):
        return 0
    return RESELLER_STAGE_DISCOUNTS.get(user.get("reseller_stage"), 0)


def reseller_status(user: dict) -> str:
    if user.get("role") != UserRole.RESELLER.value:
        return "active"
    return "approved" if user.get("approved") else "pending"


def access_state(user: dict) -> dict:
    """Display/access flags derived from role, approval and stage."""
    role = user.get("role")
    return {
        "status": reseller_status(user),
        "can_login": role != UserRole.RESELLER.value or bool(user.get("approved")),
        "is_admin": role == UserRole.ADMIN.value,
        "discount_percent": discount_percent(user),
    }


def programme_tiers() -> list[dict]:
    return [
        {"stage": stage.value, "discount_percent": RESELLER_STAGE_DISCOUNTS[stage.value]}
        for stage in ResellerStage
    ]


# =========================
# ADMIN TRANSITIONS
# =========================

async def get_reseller(db, user_id: str) -> dict:
    user = await db.get(USERS, parse_id(user_id, "user_id"))
    if not user:
        raise HTTPException(404, "User not found")

    if user.get("role") != UserRole.RESELLER.value:
        raise HTTPException(400, "User is not a reseller")

    assert_valid_user_state(user)
    return user


async def set_approval(db, user_id: str, approved: bool, admin: dict) -> dict:
    user = await get_reseller(db, user_id)

    user["approved"] = approved
    user["updated_at"] = datetime.utcnow()
    await db.put(USERS, user["id"], user)

    revoked = 0
    if not approved:
        revoked = await revoke_user_sessions(db, user["id"])

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="RESELLER_APPROVED" if approved else "RESELLER_APPROVAL_REVOKED",
        metadata={"user_id": user["id"], "sessions_revoked": revoked},
    )

    return user


async def set_stage(db, user_id: str, stage: ResellerStage, admin: dict) -> dict:
    user = await get_reseller(db, user_id)

    previous = user.get("reseller_stage")
    user["reseller_stage"] = ResellerStage(stage).value
    user["updated_at"] = datetime.utcnow()
    await db.put(USERS, user["id"], user)

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="RESELLER_STAGE_SET",
        metadata={"user_id": user["id"], "from": previous, "to": user["reseller_stage"]},
    )

    return user


async def list_resellers(db, status: str | None = None) -> list[dict]:
    query: dict = {"role": UserRole.RESELLER.value}

    if status == "pending":
        query["approved"] = False
    elif status == "approved":
        query["approved"] = True
    elif status is not None:
        raise HTTPException(400, "Invalid status filter")

    return await db.query(USERS, query, sort=[("created_at", 1)])
