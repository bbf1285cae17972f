from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure

from ila_beauty.config.constants import (
    USERS,
    SESSIONS,
    PRODUCTS,
    CATEGORIES,
    AUDIT_LOGS,
)


def _normalize_key_pairs(keys):
    return [(k, v) for k, v in keys]


async def _create_index_safe(collection, keys, **kwargs):
    """
    Create index safely.
    If Mongo reports IndexOptionsConflict/IndexKeySpecsConflict for same key pattern,
    drop the conflicting index and recreate with desired options.
    """
    desired_key = _normalize_key_pairs(keys)
    desired_name = kwargs.get("name")
    try:
        await collection.create_index(keys, **kwargs)
        return
    except OperationFailure as e:
        if getattr(e, "code", None) not in {85, 86}:
            raise

        conflicting_names = []
        async for idx in collection.list_indexes():
            idx_key = _normalize_key_pairs(list(idx.get("key", {}).items()))
            if idx_key == desired_key:
                idx_name = idx.get("name")
                if idx_name and idx_name != desired_name:
                    conflicting_names.append(idx_name)

        for idx_name in conflicting_names:
            await collection.drop_index(idx_name)

        await collection.create_index(keys, **kwargs)


async def ensure_indexes(db):
    # Users
    await _create_index_safe(
        db[USERS],
        [("email", ASCENDING)],
        name="users_email_unique_idx",
        unique=True,
    )
    await _create_index_safe(
        db[USERS],
        [("role", ASCENDING), ("approved", ASCENDING)],
        name="users_role_approved_idx",
    )

    # Sessions
    await _create_index_safe(
        db[SESSIONS],
        [("user_id", ASCENDING)],
        name="sessions_user_idx",
    )
    await _create_index_safe(
        db[SESSIONS],
        [("expires_at", ASCENDING)],
        name="sessions_expires_ttl_idx",
        expireAfterSeconds=0,
    )

    # Catalogue
    await _create_index_safe(
        db[PRODUCTS],
        [("category_id", ASCENDING), ("created_at", DESCENDING)],
        name="products_category_created_idx",
    )
    await _create_index_safe(
        db[CATEGORIES],
        [("name_key", ASCENDING)],
        name="categories_name_unique_idx",
        unique=True,
    )

    # Audit
    await _create_index_safe(
        db[AUDIT_LOGS],
        [("created_at", ASCENDING)],
        name="audit_logs_created_at_idx",
    )
