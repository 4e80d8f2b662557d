"""
Database Connection
===================
MongoDB connection management using pymongo.
"""

from __future__ import annotations

import logging

from pymongo import MongoClient
from pymongo.database import Database

from taxdesk.config import get_mongo_uri, get_mongo_db_name, get_kv_collection_name

logger = logging.getLogger(__name__)

_client: MongoClient | None = None
_db: Database | None = None


def get_db() -> Database:
    """Return the MongoDB database instance (lazy singleton)."""
    global _client, _db
    if _db is None:
        mongo_uri = get_mongo_uri()
        db_name = get_mongo_db_name()
        logger.info("Connecting to MongoDB database %s", db_name)
        _client = MongoClient(mongo_uri)
        _db = _client[db_name]
        _ensure_indexes(_db)
    return _db


def _ensure_indexes(db: Database):
    """Create indexes on first connection (idempotent)."""
    db[get_kv_collection_name()].create_index("updated_at")


def close_db():
    """Drop the cached client so the next get_db() reconnects."""
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
