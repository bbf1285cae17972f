import logging
import re
from datetime import datetime

from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError, PyMongoError

from ila_beauty.config.constants import PRODUCTS, CATEGORIES
from ila_beauty.models.product import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
    ProductInDB,
)
from ila_beauty.utils.audit import log_audit
from ila_beauty.utils.guards import new_id, parse_id
from ila_beauty.utils.serializers import serialize_product, serialize_category
from ila_beauty.utils.validators import name_key

logger = logging.getLogger(__name__)


def sanitize_image_url(url: str | None) -> str | None:
    if url and not url.startswith(("http://", "https://", "/")):
        return None
    return url


async def _save(db, collection: str, key: str, doc: dict, label: str) -> dict:
    try:
        return await db.put(collection, key, doc)
    except DuplicateKeyError:
        raise HTTPException(409, f"{label.capitalize()} already exists")
    except PyMongoError:
        logger.exception("CATALOG_SAVE_ERROR %s=%s", label, key)
        raise HTTPException(500, f"Failed to save {label}")


async def _remove(db, collection: str, key: str, label: str) -> bool:
    try:
        return await db.delete(collection, key)
    except PyMongoError:
        logger.exception("CATALOG_DELETE_ERROR %s=%s", label, key)
        raise HTTPException(500, f"Failed to delete {label}")


# =========================
# CATEGORIES
# =========================

async def categories_by_id(db) -> dict[str, dict]:
    return {c["id"]: c for c in await db.query(CATEGORIES)}


async def list_categories(db) -> list[dict]:
    categories = await db.query(CATEGORIES, sort=[("name_key", 1)])
    return [serialize_category(c) for c in categories]


async def get_category(db, category_id: str) -> dict:
    category = await db.get(CATEGORIES, parse_id(category_id, "category_id"))
    if not category:
        raise HTTPException(404, "Category not found")
    return category


async def _assert_name_free(db, name: str, exclude_id: str | None = None):
    clash = await db.find_one(CATEGORIES, {"name_key": name_key(name)})
    if clash and clash["id"] != exclude_id:
        raise HTTPException(409, "Category already exists")


async def create_category(db, data: CategoryCreate, admin: dict) -> dict:
    name = data.name
    await _assert_name_free(db, name)

    now = datetime.utcnow()
    category = {
        "name": name,
        "name_key": name_key(name),
        "description": data.description,
        "image_url": sanitize_image_url(data.image_url),
        "created_at": now,
        "updated_at": now,
    }
    category = await _save(db, CATEGORIES, new_id(), category, "category")

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="CATEGORY_CREATED",
        metadata={"category_id": category["id"], "name": name},
    )

    return serialize_category(category)


async def update_category(db, category_id: str, data: CategoryUpdate, admin: dict) -> dict:
    category = await get_category(db, category_id)
    changes = data.model_dump(exclude_unset=True)

    if "name" in changes:
        name = changes["name"]
        await _assert_name_free(db, name, exclude_id=category["id"])
        category["name"] = name
        category["name_key"] = name_key(name)

    if "description" in changes:
        category["description"] = changes["description"]

    if "image_url" in changes:
        category["image_url"] = sanitize_image_url(changes["image_url"])

    category["updated_at"] = datetime.utcnow()
    category = await _save(db, CATEGORIES, category["id"], category, "category")

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="CATEGORY_UPDATED",
        metadata={"category_id": category["id"], "fields": sorted(changes)},
    )

    return serialize_category(category)


async def delete_category(db, category_id: str, admin: dict) -> dict:
    category = await get_category(db, category_id)

    # products keep their dangling category_id
    orphaned = await db.query(PRODUCTS, {"category_id": category["id"]})
    await _remove(db, CATEGORIES, category["id"], "category")

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="CATEGORY_DELETED",
        metadata={"category_id": category["id"], "orphaned_products": len(orphaned)},
    )

    return {
        "message": "Category deleted",
        "category_id": category["id"],
        "orphaned_products": len(orphaned),
    }


# =========================
# PRODUCTS
# =========================

async def list_products(
    db,
    category_id: str | None = None,
    q: str | None = None,
    limit: int | None = None,
) -> list[dict]:
    query: dict = {}
    if category_id:
        query["category_id"] = category_id

    products = await db.query(PRODUCTS, query, sort=[("created_at", -1)])

    if q:
        pattern = re.compile(re.escape(q.strip()), re.IGNORECASE)
        products = [
            p for p in products
            if pattern.search(p.get("name") or "") or pattern.search(p.get("description") or "")
        ]

    if limit:
        products = products[:limit]

    categories = await categories_by_id(db)
    return [serialize_product(p, categories) for p in products]


async def get_product(db, product_id: str) -> dict:
    product = await db.get(PRODUCTS, parse_id(product_id, "product_id"))
    if not product:
        raise HTTPException(404, "Product not found")
    return product


async def product_detail(db, product_id: str) -> dict:
    product = await get_product(db, product_id)
    return serialize_product(product, await categories_by_id(db))


async def _resolve_category_id(db, category_id: str | None) -> str | None:
    if not category_id:
        return None
    category = await get_category(db, category_id)
    return category["id"]


async def create_product(db, data: ProductCreate, admin: dict) -> dict:
    now = datetime.utcnow()
    product = {
        "id": new_id(),
        "name": data.name,
        "description": data.description,
        "price": data.price,
        "category_id": await _resolve_category_id(db, data.category_id),
        "image_url": sanitize_image_url(data.image_url),
        "created_at": now,
        "updated_at": now,
    }
    ProductInDB.model_validate(product)

    product = await _save(db, PRODUCTS, product["id"], product, "product")

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="PRODUCT_CREATED",
        metadata={"product_id": product["id"], "name": product["name"]},
    )

    return serialize_product(product, await categories_by_id(db))


async def update_product(db, product_id: str, data: ProductUpdate, admin: dict) -> dict:
    product = await get_product(db, product_id)
    changes = data.model_dump(exclude_unset=True)

    if "name" in changes:
        product["name"] = changes["name"]

    if "description" in changes:
        product["description"] = changes["description"]

    if "price" in changes:
        product["price"] = changes["price"]

    if "category_id" in changes:
        product["category_id"] = await _resolve_category_id(db, changes["category_id"])

    if "image_url" in changes:
        product["image_url"] = sanitize_image_url(changes["image_url"])

    product["updated_at"] = datetime.utcnow()
    ProductInDB.model_validate(product)

    product = await _save(db, PRODUCTS, product["id"], product, "product")

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="PRODUCT_UPDATED",
        metadata={"product_id": product["id"], "fields": sorted(changes)},
    )

    return serialize_product(product, await categories_by_id(db))


async def delete_product(db, product_id: str, admin: dict) -> dict:
    product = await get_product(db, product_id)
    await _remove(db, PRODUCTS, product["id"], "product")

    await log_audit(
        db,
        actor_id=admin["id"],
        actor_role="admin",
        action="PRODUCT_DELETED",
        metadata={"product_id": product["id"], "name": product["name"]},
    )

    return {"message": "Product deleted", "product_id": product["id"]}
