"""
Key-Value Storage
=================
Shared string key/value store that every form writes its total into and the
summary views read back from. Last write wins; there is no locking, versioning
or merge between concurrent writers.
"""

from __future__ import annotations

import logging
from datetime import datetime

from pymongo.collection import Collection

from taxdesk.config import STORAGE_BACKENDS, get_storage_backend, get_kv_collection_name

logger = logging.getLogger(__name__)

# Well-known keys
SALARY_TOTAL = "salary_total"
HOUSE_PROPERTY_TOTAL = "hp_total"
BUSINESS_PROFESSION_TOTAL = "pgbp_total"
CAPITAL_GAINS_TOTAL = "cg_total"
OTHER_SOURCES_TOTAL = "os_total"
DEDUCTIONS_TOTAL = "deductions_total"
DEDUCTIONS_DATA = "deductions_data"

INCOME_TOTAL_KEYS = (
    SALARY_TOTAL,
    HOUSE_PROPERTY_TOTAL,
    BUSINESS_PROFESSION_TOTAL,
    CAPITAL_GAINS_TOTAL,
    OTHER_SOURCES_TOTAL,
)


class MemoryKeyValueStore:
    """In-process store. Used by tests and when TAXDESK_STORAGE=memory."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str):
        self._data[key] = str(value)

    def clear(self):
        self._data.clear()


class MongoKeyValueStore:
    """One document per key: {_id: key, value: str, updated_at: iso}."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def get(self, key: str) -> str | None:
        doc = self.collection.find_one({"_id": key})
        if doc is None:
            return None
        return doc.get("value")

    def set(self, key: str, value: str):
        self.collection.update_one(
            {"_id": key},
            {"$set": {"value": str(value), "updated_at": datetime.now().isoformat()}},
            upsert=True,
        )

    def clear(self):
        result = self.collection.delete_many({})
        logger.info("Cleared %d stored entries", result.deleted_count)


_store: MemoryKeyValueStore | MongoKeyValueStore | None = None


def create_store(backend: str | None = None) -> MemoryKeyValueStore | MongoKeyValueStore:
    """Build a store for the given backend name (defaults to configuration)."""
    backend = backend or get_storage_backend()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend: {backend!r} (expected one of {STORAGE_BACKENDS})")
    if backend == "memory":
        return MemoryKeyValueStore()

    from taxdesk.database import get_db

    return MongoKeyValueStore(get_db()[get_kv_collection_name()])


def get_store() -> MemoryKeyValueStore | MongoKeyValueStore:
    """Return the process-wide store (lazy singleton)."""
    global _store
    if _store is None:
        _store = create_store()
        logger.info("Using %s key-value store", type(_store).__name__)
    return _store


def reset_store():
    global _store
    _store = None
