"""Key-value document store injected into every route through ``get_db``.

Records are plain dicts addressed by ``(collection, key)``. The stored record
always carries its key under ``"id"``. ``MongoStore`` is the production
backend; ``MemoryStore`` keeps everything in process and backs the tests.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ASCENDING, DESCENDING

Filters = Dict[str, Any]
Sort = Sequence[Tuple[str, int]]


class Store(ABC):

    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def put(self, collection: str, key: str, doc: dict) -> dict:
        """Insert or fully overwrite the record stored under ``key``."""

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        *,
        sort: Optional[Sort] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        ...

    @abstractmethod
    async def delete_many(self, collection: str, filters: Filters) -> int:
        ...

    async def find_one(self, collection: str, filters: Filters) -> Optional[dict]:
        docs = await self.query(collection, filters, limit=1)
        return docs[0] if docs else None

    async def ensure_indexes(self) -> None:
        return None

    async def ping(self) -> None:
        return None


# =====================================================
# MONGODB (MOTOR)
# =====================================================

class MongoStore(Store):

    def __init__(self, db):
        self.db = db

    async def get(self, collection, key):
        return await self.db[collection].find_one({"_id": key}, {"_id": 0})

    async def put(self, collection, key, doc):
        record = dict(doc)
        record["id"] = key
        await self.db[collection].replace_one(
            {"_id": key},
            {**record, "_id": key},
            upsert=True,
        )
        return record

    async def delete(self, collection, key):
        result = await self.db[collection].delete_one({"_id": key})
        return result.deleted_count > 0

    async def query(self, collection, filters=None, *, sort=None, limit=None):
        cursor = self.db[collection].find(filters or {}, {"_id": 0})
        if sort:
            cursor = cursor.sort(list(sort))
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=None)

    async def delete_many(self, collection, filters):
        result = await self.db[collection].delete_many(filters)
        return result.deleted_count

    async def ensure_indexes(self):
        from ila_beauty.utils.indexes import ensure_indexes

        await ensure_indexes(self.db)

    async def ping(self):
        await self.db.command("ping")


# =====================================================
# IN-PROCESS
# =====================================================

def _match_value(value, condition) -> bool:
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        for op, operand in condition.items():
            if op == "$in":
                if value not in operand:
                    return False
            elif op == "$ne":
                if value == operand:
                    return False
            elif value is None:
                return False
            elif op == "$lt":
                if not value < operand:
                    return False
            elif op == "$gte":
                if not value >= operand:
                    return False
            else:
                raise ValueError(f"Unsupported query operator: {op}")
        return True

    return value == condition


def matches(doc: dict, filters: Optional[Filters]) -> bool:
    return all(_match_value(doc.get(field), cond) for field, cond in (filters or {}).items())


class MemoryStore(Store):

    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}

    def _collection(self, name: str) -> Dict[str, dict]:
        return self._collections.setdefault(name, {})

    async def get(self, collection, key):
        doc = self._collection(collection).get(key)
        return copy.deepcopy(doc) if doc is not None else None

    async def put(self, collection, key, doc):
        record = copy.deepcopy(dict(doc))
        record["id"] = key
        self._collection(collection)[key] = record
        return copy.deepcopy(record)

    async def delete(self, collection, key):
        return self._collection(collection).pop(key, None) is not None

    async def query(self, collection, filters=None, *, sort=None, limit=None):
        docs = [d for d in self._collection(collection).values() if matches(d, filters)]

        # stable sorts applied last-key-first give a compound ordering
        for field, direction in reversed(list(sort or [])):
            present = [d for d in docs if d.get(field) is not None]
            missing = [d for d in docs if d.get(field) is None]
            present.sort(key=lambda d: d[field], reverse=direction == DESCENDING)
            docs = present + missing if direction == ASCENDING else missing + present

        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def delete_many(self, collection, filters):
        coll = self._collection(collection)
        doomed = [key for key, doc in coll.items() if matches(doc, filters)]
        for key in doomed:
            del coll[key]
        return len(doomed)
