from fastapi import HTTPException
from bson import ObjectId

# -------------------------------
# Record Id Guard
# -------------------------------

def new_id() -> str:
    return str(ObjectId())


def parse_id(value: str, name: str = "id") -> str:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return str(ObjectId(value))


# -------------------------------
# User State Guard
# -------------------------------

def assert_valid_user_state(user: dict):
    role = user.get("role")
    stage = user.get("reseller_stage")

    if role == "reseller" and not stage:
        raise HTTPException(
            status_code=500,
            detail="Corrupt user state: reseller without stage"
        )

    if role != "reseller" and stage:
        raise HTTPException(
            status_code=500,
            detail=f"Corrupt user state: {role} with reseller stage"
        )
