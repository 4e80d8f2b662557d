import pytest

from taxdesk import database, storage
from taxdesk.storage import MemoryKeyValueStore


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def fresh_backends():
    """Drop the process-wide store and Mongo client before and after a test."""
    storage.reset_store()
    database.close_db()
    yield
    storage.reset_store()
    database.close_db()
