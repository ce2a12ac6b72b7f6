"""
Tests for storage handles and the backend factory.
"""

import logging

import pytest
import redis
import structlog

from eventhub.core.config import Settings
from eventhub.core.exceptions import StorageUnavailableError
from eventhub.infrastructure.factory import create_storage
from eventhub.infrastructure.redis_client import RedisStorage
from eventhub.infrastructure.storage import FileStorage, MemoryStorage
from eventhub.services.event_store import EventStore, WriteResult, create_event_store


class FakeRedis:
    """Dict-backed stand-in for the three Redis commands the handle uses."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0


class DownRedis:
    def get(self, key):
        raise redis.ConnectionError("connection refused")

    def set(self, key, value):
        raise redis.ConnectionError("connection refused")

    def delete(self, key):
        raise redis.ConnectionError("connection refused")


def test_memory_storage_round_trip():
    storage = MemoryStorage()
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"
    storage.remove_item("k")
    assert storage.get_item("k") is None
    storage.remove_item("k")


def test_memory_storage_quota():
    storage = MemoryStorage(quota_bytes=10)
    storage.set_item("k", "12345")
    with pytest.raises(StorageUnavailableError):
        storage.set_item("k", "1234567890")
    assert storage.get_item("k") == "12345"


def test_file_storage_round_trip(tmp_path):
    storage = FileStorage(tmp_path)

    assert storage.get_item("eventhub_events") is None
    storage.set_item("eventhub_events", "[]")
    assert storage.get_item("eventhub_events") == "[]"
    assert (tmp_path / "eventhub_events.json").read_text() == "[]"

    storage.remove_item("eventhub_events")
    assert storage.get_item("eventhub_events") is None
    storage.remove_item("eventhub_events")


def test_file_storage_leaves_no_temp_files(tmp_path):
    storage = FileStorage(tmp_path)
    storage.set_item("k", "one")
    storage.set_item("k", "two")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".."])
def test_file_storage_rejects_bad_keys(tmp_path, key):
    storage = FileStorage(tmp_path)
    with pytest.raises(StorageUnavailableError):
        storage.set_item(key, "x")
    with pytest.raises(StorageUnavailableError):
        storage.get_item(key)


def test_store_with_bad_file_key_never_raises(tmp_path, make_event):
    store = EventStore(FileStorage(tmp_path), key="campus/events")

    assert store.load_all() == []
    assert store.find_by_id("E1") is None
    assert store.upsert(make_event(id="E1")) is WriteResult.UNAVAILABLE
    assert store.remove("E1") is WriteResult.UNAVAILABLE
    assert list(tmp_path.iterdir()) == []


def test_file_backed_store_survives_reopen(tmp_path, make_event):
    EventStore(FileStorage(tmp_path)).upsert(make_event(id="E1"))
    assert EventStore(FileStorage(tmp_path)).find_by_id("E1") is not None


def test_redis_storage_round_trip(make_event):
    store = EventStore(RedisStorage(FakeRedis()))

    assert store.upsert(make_event(id="E1")) is WriteResult.OK
    assert store.find_by_id("E1").version == 1


def test_redis_outage_never_raises_from_store(make_event):
    store = EventStore(RedisStorage(DownRedis()))

    assert store.load_all() == []
    assert store.upsert(make_event(id="E1")) is WriteResult.UNAVAILABLE
    assert store.remove("E1") is WriteResult.UNAVAILABLE


def test_redis_errors_become_storage_unavailable():
    storage = RedisStorage(DownRedis())
    with pytest.raises(StorageUnavailableError):
        storage.get_item("k")


def test_factory_builds_configured_backend(tmp_path):
    settings = Settings(STORAGE_ROOT=str(tmp_path), STORAGE_QUOTA_BYTES=1234)

    memory = create_storage("memory", settings=settings)
    assert isinstance(memory, MemoryStorage)
    assert memory.quota_bytes == 1234
    assert isinstance(create_storage("file", settings=settings), FileStorage)

    with pytest.raises(ValueError):
        create_storage("sqlite", settings=settings)


def test_create_event_store_seeds_when_enabled(tmp_path):
    settings = Settings(
        STORAGE_BACKEND="file",
        STORAGE_ROOT=str(tmp_path),
        EVENTS_STORAGE_KEY="campus_events",
        SEED_SAMPLE_EVENTS=True,
    )

    store = create_event_store(settings)

    assert store.key == "campus_events"
    assert len(store.load_all()) == 3
    assert (tmp_path / "campus_events.json").exists()


def test_repeated_store_setup_installs_one_log_handler(tmp_path):
    settings = Settings(STORAGE_BACKEND="file", STORAGE_ROOT=str(tmp_path))

    for _ in range(3):
        create_event_store(settings)

    ours = [
        handler for handler in logging.getLogger().handlers
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
    ]
    assert len(ours) == 1
