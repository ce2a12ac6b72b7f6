"""
User store: account records in their own persisted container.

Uses the same whole-list read/replace pattern and failure policy as the
event store. Records carry no version; only admins write here, and every
read-modify-write holds the storage handle's lock.
"""

import json
from typing import Optional

from pydantic import ValidationError

from eventhub.core.config import Settings, get_settings
from eventhub.core.exceptions import StorageUnavailableError
from eventhub.core.logging import get_logger, setup_logging
from eventhub.core.metrics import record_store_operation, store_malformed_reads, store_unreadable_records
from eventhub.infrastructure.storage import StorageBackend
from eventhub.models.user import User
from eventhub.services.event_store import WriteResult

logger = get_logger(__name__)

DEFAULT_USERS_KEY = "eventhub_users"


class UserStore:
    """Whole-list read/replace access to the user container."""

    def __init__(self, storage: StorageBackend, key: str = DEFAULT_USERS_KEY):
        self.storage = storage
        self.key = key

    def _read(self) -> tuple[list[User], bool]:
        """(users, intact); `intact` is False when anything stored could not be read."""
        raw = self.storage.get_item(self.key)
        if raw is None:
            return [], True

        try:
            data = json.loads(raw)
        except ValueError:
            data = None
        if not isinstance(data, list):
            store_malformed_reads.inc()
            logger.warning("users_container_malformed", key=self.key)
            return [], False

        users = []
        unreadable = 0
        for record in data:
            try:
                users.append(User.model_validate(record))
            except ValidationError:
                unreadable += 1
        if unreadable:
            store_unreadable_records.inc(unreadable)
            logger.warning("users_container_partly_unreadable", key=self.key, skipped=unreadable)
        return users, unreadable == 0

    def _write(self, users: list[User]) -> None:
        self.storage.set_item(self.key, json.dumps([user.to_record() for user in users]))

    def load_all(self) -> list[User]:
        """Every readable stored user. Never raises."""
        try:
            users, _ = self._read()
            return users
        except StorageUnavailableError as e:
            record_store_operation("load_users", "unavailable")
            logger.error("users_load_failed", key=self.key, error=str(e))
            return []

    def find_by_id(self, user_id: str) -> Optional[User]:
        for user in self.load_all():
            if user.id == user_id:
                return user
        return None

    def upsert(self, user: User) -> WriteResult:
        with self.storage.lock:
            try:
                users, intact = self._read()
                if not intact:
                    record_store_operation("upsert_user", "unavailable")
                    logger.error("user_upsert_refused", user_id=user.id, reason="container has unreadable data")
                    return WriteResult.UNAVAILABLE
                index = next((i for i, u in enumerate(users) if u.id == user.id), None)
                if index is None:
                    users.append(user)
                else:
                    users[index] = user
                self._write(users)
            except StorageUnavailableError as e:
                record_store_operation("upsert_user", "unavailable")
                logger.error("user_upsert_failed", user_id=user.id, error=str(e))
                return WriteResult.UNAVAILABLE

        record_store_operation("upsert_user", "ok")
        return WriteResult.OK

    def remove(self, user_id: str) -> WriteResult:
        with self.storage.lock:
            try:
                users, intact = self._read()
                if not intact:
                    record_store_operation("remove_user", "unavailable")
                    logger.error("user_remove_refused", user_id=user_id, reason="container has unreadable data")
                    return WriteResult.UNAVAILABLE
                self._write([u for u in users if u.id != user_id])
            except StorageUnavailableError as e:
                record_store_operation("remove_user", "unavailable")
                logger.error("user_remove_failed", user_id=user_id, error=str(e))
                return WriteResult.UNAVAILABLE

        record_store_operation("remove_user", "ok")
        return WriteResult.OK

    def export_raw(self) -> list[dict]:
        return [user.to_record() for user in self.load_all()]


DEFAULT_USERS = [
    dict(id="1", name="Ronak Bhambu", email="ronak@college.edu", role="organizer", join_date="Jan 2024", events_created=3),
    dict(id="2", name="Sarah Johnson", email="sarah@college.edu", role="student", join_date="Feb 2024"),
    dict(id="3", name="Mike Chen", email="mike@college.edu", role="organizer", join_date="Dec 2023", events_created=5),
]


def seed_default_users(store: UserStore) -> list[User]:
    """Store the demo accounts if no user container exists yet. Returns what was added."""
    try:
        if store.storage.get_item(store.key) is not None:
            return []
    except StorageUnavailableError as e:
        logger.error("users_seed_skipped", error=str(e))
        return []

    added = []
    for fields in DEFAULT_USERS:
        user = User(**fields)
        if store.upsert(user) is WriteResult.OK:
            added.append(user)

    logger.info("default_users_seeded", count=len(added))
    return added


def create_user_store(
    settings: Optional[Settings] = None,
    storage: Optional[StorageBackend] = None,
) -> UserStore:
    """Build a user store, sharing `storage` when given, and seed the demo accounts if enabled."""
    from eventhub.infrastructure.factory import create_storage

    settings = settings or get_settings()
    setup_logging()
    store = UserStore(storage or create_storage(settings=settings), key=settings.USERS_STORAGE_KEY)
    if settings.SEED_DEFAULT_USERS:
        seed_default_users(store)
    return store
