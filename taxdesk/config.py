"""
Configuration
=============
Environment-driven settings, loaded from a local .env file when present.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("mongo", "memory")


def get_storage_backend() -> str:
    """Which key-value backend to use: 'mongo' (default) or 'memory'."""
    return os.getenv("TAXDESK_STORAGE", "mongo").strip().lower()


def get_mongo_uri() -> str:
    return os.getenv("MONGO_URI", "mongodb://localhost:27017")


def get_mongo_db_name() -> str:
    return os.getenv("MONGO_DB_NAME", "tax_desk")


def get_kv_collection_name() -> str:
    return os.getenv("TAXDESK_KV_COLLECTION", "kv")


def get_log_level() -> str:
    return os.getenv("TAXDESK_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None):
    """Configure root logging once for the app process."""
    logging.basicConfig(
        level=level or get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
