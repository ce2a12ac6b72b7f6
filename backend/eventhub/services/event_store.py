"""
Event store: the authoritative event list inside one persisted container.

CONCURRENCY STRATEGY: Single Writer + Optimistic Versioning
===========================================================

Problem:
  Every write is a full read-modify-write of the container. Two callers
  holding different in-memory copies of the same event can both pass the
  capacity check, and the second write silently clobbers the first.

Solution:
  1. The storage handle owns a lock; the store holds it for the whole
     read-modify-write cycle, so writes within a process never interleave.
  2. Each event carries a `version`. `upsert` compares the caller's version
     with the stored one and rejects the write on mismatch (CONFLICT).
     A successful write stores version + 1.
  3. Callers that get CONFLICT re-read and retry (see registration_service).

  Writers in separate processes sharing a file or Redis key are still
  uncoordinated; only the version check guards them, and it is not atomic
  across processes.

Failure policy:
  Nothing raises past this module. Records are validated one at a time:
  older layouts are upgraded, records that still fail are skipped. A read
  returns whatever could be recovered. A write never replaces a container
  that held anything it could not read; it returns UNAVAILABLE instead and
  the container stays as it is until `clear()` is called.
"""

import json
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from eventhub.core.config import Settings, get_settings
from eventhub.core.exceptions import MalformedDataError, StorageUnavailableError
from eventhub.core.logging import get_logger, setup_logging
from eventhub.core.metrics import (
    record_store_operation,
    store_legacy_records,
    store_malformed_reads,
    store_unreadable_records,
)
from eventhub.infrastructure.storage import StorageBackend
from eventhub.models.event import Event, upgrade_legacy_record

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "eventhub_events"


class WriteResult(str, Enum):
    OK = "ok"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


def decode_events(raw: str) -> tuple[list[Event], int]:
    """
    Parse a persisted container into (events, unreadable record count).
    Raises MalformedDataError when the container itself is not a JSON array.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise MalformedDataError(f"container is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedDataError("container is not a JSON array")

    events: list[Event] = []
    unreadable = 0
    for record in data:
        if not isinstance(record, dict):
            unreadable += 1
            continue
        upgraded = upgrade_legacy_record(record)
        try:
            events.append(Event.model_validate(upgraded))
        except ValidationError as e:
            unreadable += 1
            logger.warning("event_record_unreadable", event_id=record.get("id"), errors=e.error_count())
            continue
        if upgraded != record:
            store_legacy_records.inc()
            logger.info("event_record_upgraded", event_id=record.get("id"))
    return events, unreadable


def encode_events(events: list[Event]) -> str:
    return json.dumps([event.to_record() for event in events])


class EventStore:
    """Whole-list read/replace access to the event container."""

    def __init__(self, storage: StorageBackend, key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def _read(self) -> tuple[list[Event], bool]:
        """
        Load the container. Returns (events, intact); `intact` is False when
        anything stored could not be read. Storage errors propagate.
        """
        raw = self.storage.get_item(self.key)
        if raw is None:
            return [], True
        try:
            events, unreadable = decode_events(raw)
        except MalformedDataError as e:
            store_malformed_reads.inc()
            logger.warning("events_container_malformed", key=self.key, error=str(e))
            return [], False
        if unreadable:
            store_unreadable_records.inc(unreadable)
            logger.warning("events_container_partly_unreadable", key=self.key, skipped=unreadable)
            return events, False
        return events, True

    def _write(self, events: list[Event]) -> None:
        try:
            payload = encode_events(events)
        except (TypeError, ValueError) as e:
            raise StorageUnavailableError(f"cannot serialize events: {e}") from e
        self.storage.set_item(self.key, payload)

    def load_all(self) -> list[Event]:
        """Return a snapshot of every readable stored event. Never raises."""
        try:
            events, _ = self._read()
            return events
        except StorageUnavailableError as e:
            record_store_operation("load", "unavailable")
            logger.error("events_load_failed", key=self.key, error=str(e))
            return []

    def find_by_id(self, event_id: str) -> Optional[Event]:
        for event in self.load_all():
            if event.id == event_id:
                return event
        return None

    def upsert(self, event: Event) -> WriteResult:
        """
        Insert or replace `event` by id.
        Rejects the write when the stored copy has moved past `event.version`.
        """
        with self.storage.lock:
            try:
                events, intact = self._read()
                if not intact:
                    record_store_operation("upsert", "unavailable")
                    logger.error("event_upsert_refused", event_id=event.id, reason="container has unreadable data")
                    return WriteResult.UNAVAILABLE

                index = next((i for i, e in enumerate(events) if e.id == event.id), None)

                if index is not None and events[index].version != event.version:
                    record_store_operation("upsert", "conflict")
                    logger.info(
                        "event_upsert_conflict",
                        event_id=event.id,
                        expected_version=event.version,
                        stored_version=events[index].version,
                    )
                    return WriteResult.CONFLICT

                stored = event.evolve(version=event.version + 1)
                if index is None:
                    events.append(stored)
                else:
                    events[index] = stored
                self._write(events)
            except StorageUnavailableError as e:
                record_store_operation("upsert", "unavailable")
                logger.error("event_upsert_failed", event_id=event.id, error=str(e))
                return WriteResult.UNAVAILABLE

        record_store_operation("upsert", "ok")
        logger.debug("event_upserted", event_id=event.id, version=stored.version)
        return WriteResult.OK

    def remove(self, event_id: str) -> WriteResult:
        with self.storage.lock:
            try:
                events, intact = self._read()
                if not intact:
                    record_store_operation("remove", "unavailable")
                    logger.error("event_remove_refused", event_id=event_id, reason="container has unreadable data")
                    return WriteResult.UNAVAILABLE
                self._write([e for e in events if e.id != event_id])
            except StorageUnavailableError as e:
                record_store_operation("remove", "unavailable")
                logger.error("event_remove_failed", event_id=event_id, error=str(e))
                return WriteResult.UNAVAILABLE

        record_store_operation("remove", "ok")
        logger.info("event_removed", event_id=event_id)
        return WriteResult.OK

    def clear(self) -> WriteResult:
        """Drop the whole container, readable or not."""
        with self.storage.lock:
            try:
                self.storage.remove_item(self.key)
            except StorageUnavailableError as e:
                record_store_operation("clear", "unavailable")
                logger.error("events_clear_failed", key=self.key, error=str(e))
                return WriteResult.UNAVAILABLE

        record_store_operation("clear", "ok")
        logger.warning("events_cleared", key=self.key)
        return WriteResult.OK

    def export_raw(self) -> list[dict]:
        """Stored records in the persisted layout."""
        return [event.to_record() for event in self.load_all()]


def create_event_store(settings: Optional[Settings] = None) -> EventStore:
    """Application entry point: configure logging, build the storage handle and store, seed samples if enabled."""
    from eventhub.infrastructure.factory import create_storage
    from eventhub.services.event_service import seed_sample_events

    settings = settings or get_settings()
    setup_logging()
    store = EventStore(create_storage(settings=settings), key=settings.EVENTS_STORAGE_KEY)
    if settings.SEED_SAMPLE_EVENTS:
        seed_sample_events(store)
    return store
