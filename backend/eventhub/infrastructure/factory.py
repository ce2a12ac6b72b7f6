"""
Storage backend factory.
Configures which storage handle to use.
"""

from pathlib import Path
from typing import Optional

from eventhub.core.config import Settings, get_settings
from eventhub.infrastructure.redis_client import RedisClient, RedisStorage
from eventhub.infrastructure.storage import FileStorage, MemoryStorage, StorageBackend


def create_storage(
    backend: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> StorageBackend:
    """
    Build a storage handle.

    Backend selection comes from STORAGE_BACKEND unless given explicitly:
    - memory: process-local, quota from STORAGE_QUOTA_BYTES
    - file: STORAGE_ROOT directory
    - redis: REDIS_URL
    """
    settings = settings or get_settings()
    selected = (backend or settings.STORAGE_BACKEND).strip().lower()

    if selected == "memory":
        return MemoryStorage(quota_bytes=settings.STORAGE_QUOTA_BYTES)
    if selected == "file":
        return FileStorage(Path(settings.STORAGE_ROOT))
    if selected == "redis":
        return RedisStorage(RedisClient.get_client(settings.REDIS_URL))
    raise ValueError(f"unsupported storage backend: {selected}")
