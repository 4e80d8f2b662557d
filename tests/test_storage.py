from unittest.mock import MagicMock

import pytest

from taxdesk import storage
from taxdesk.storage import MemoryKeyValueStore, MongoKeyValueStore, create_store


class TestMemoryStore:

    def test_set_and_get(self):
        store = MemoryKeyValueStore()
        store.set("salary_total", 1000.5)
        assert store.get("salary_total") == "1000.5"

    def test_last_write_wins(self):
        store = MemoryKeyValueStore()
        store.set("cg_total", "1")
        store.set("cg_total", "2")
        assert store.get("cg_total") == "2"

    def test_clear_drops_every_key(self):
        store = MemoryKeyValueStore({"salary_total": "1", "deductions_data": "{}"})
        store.clear()
        assert store.get("salary_total") is None
        assert store.get("deductions_data") is None


class TestMongoStore:

    def test_get_returns_value_field(self):
        collection = MagicMock()
        collection.find_one.return_value = {"_id": "hp_total", "value": "240000"}
        assert MongoKeyValueStore(collection).get("hp_total") == "240000"
        collection.find_one.assert_called_once_with({"_id": "hp_total"})

    def test_get_missing_key(self):
        collection = MagicMock()
        collection.find_one.return_value = None
        assert MongoKeyValueStore(collection).get("hp_total") is None

    def test_set_upserts(self):
        collection = MagicMock()
        MongoKeyValueStore(collection).set("os_total", 35000.0)
        args, kwargs = collection.update_one.call_args
        assert args[0] == {"_id": "os_total"}
        assert args[1]["$set"]["value"] == "35000.0"
        assert kwargs["upsert"] is True

    def test_clear_deletes_all_documents(self):
        collection = MagicMock()
        collection.delete_many.return_value.deleted_count = 3
        MongoKeyValueStore(collection).clear()
        collection.delete_many.assert_called_once_with({})


def test_create_store_memory_backend():
    assert isinstance(create_store("memory"), MemoryKeyValueStore)


def test_create_store_rejects_unknown_backend():
    with pytest.raises(ValueError):
        create_store("redis")


def test_get_store_uses_configured_backend(monkeypatch, fresh_backends):
    monkeypatch.setenv("TAXDESK_STORAGE", "memory")
    first = storage.get_store()
    assert isinstance(first, MemoryKeyValueStore)
    assert storage.get_store() is first


def test_mongo_backend_uses_configured_collection(monkeypatch, fresh_backends):
    from taxdesk import database

    client = MagicMock()
    monkeypatch.setattr(database, "MongoClient", MagicMock(return_value=client))
    monkeypatch.setenv("MONGO_DB_NAME", "tax_desk_test")
    monkeypatch.setenv("TAXDESK_KV_COLLECTION", "kv_test")
    store = create_store("mongo")
    assert isinstance(store, MongoKeyValueStore)
    client.__getitem__.assert_called_once_with("tax_desk_test")
    db = client.__getitem__.return_value
    db.__getitem__.assert_any_call("kv_test")
    db.__getitem__.return_value.create_index.assert_called_once_with("updated_at")
