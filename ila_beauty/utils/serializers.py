from datetime import datetime

from ila_beauty.config.constants import UNCATEGORIZED
from ila_beauty.utils.resellers import access_state


def serialize_datetime(value):
    return value.isoformat() if isinstance(value, datetime) else None


def serialize_user(user: dict) -> dict:
    return {
        "id": user["id"],
        "email": user["email"],
        "role": user["role"],
        "approved": user.get("approved", False),
        "reseller_stage": user.get("reseller_stage"),

        "access": access_state(user),

        "created_at": serialize_datetime(user.get("created_at")),
        "updated_at": serialize_datetime(user.get("updated_at")),
    }


def serialize_session(session: dict | None) -> dict | None:
    if not session:
        return None
    return {
        "access_token": session["access_token"],
        "token_type": session["token_type"],
        "expires_at": serialize_datetime(session.get("expires_at")),
    }


def serialize_category(category: dict) -> dict:
    return {
        "id": category["id"],
        "name": category["name"],
        "description": category.get("description"),
        "image_url": category.get("image_url"),
        "created_at": serialize_datetime(category.get("created_at")),
    }


def serialize_product(product: dict, categories: dict[str, dict]) -> dict:
    category = categories.get(product.get("category_id") or "")

    return {
        "id": product["id"],
        "name": product["name"],
        "description": product.get("description"),
        "price": product["price"],
        "image_url": product.get("image_url"),

        # dangling or missing references render as Uncategorized
        "category_id": product.get("category_id"),
        "category_name": category["name"] if category else UNCATEGORIZED,

        "created_at": serialize_datetime(product.get("created_at")),
        "updated_at": serialize_datetime(product.get("updated_at")),
    }
