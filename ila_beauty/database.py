from motor.motor_asyncio import AsyncIOMotorClient

from ila_beauty.config.env import STORE_BACKEND, MONGO_URI
from ila_beauty.store import Store, MongoStore, MemoryStore

_store: Store | None = None


def _build_store() -> Store:
    if STORE_BACKEND == "memory":
        return MemoryStore()

    if not MONGO_URI:
        raise RuntimeError("MONGODB_URI not set")

    client = AsyncIOMotorClient(MONGO_URI)
    return MongoStore(client.get_default_database())


def get_db() -> Store:
    global _store
    if _store is None:
        _store = _build_store()
    return _store
