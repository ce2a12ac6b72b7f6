"""
Redis-backed storage handle.
Lets several processes share one event container key.
"""

import redis
from typing import Optional

from eventhub.core.exceptions import StorageUnavailableError
from eventhub.infrastructure.storage import StorageBackend


class RedisClient:
    """Singleton Redis client with connection pooling."""

    _instance: Optional[redis.Redis] = None

    @classmethod
    def get_client(cls, url: str) -> redis.Redis:
        """Get or create Redis client instance."""
        if cls._instance is None:
            cls._instance = redis.Redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )
        return cls._instance


class RedisStorage(StorageBackend):
    """
    Storage handle over a Redis client.

    The in-process lock still serializes writers within this process;
    writers in other processes are not coordinated.
    """

    def __init__(self, client: redis.Redis) -> None:
        super().__init__()
        self.redis = client

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self.redis.get(key)
        except redis.RedisError as e:
            raise StorageUnavailableError(f"redis get failed for {key!r}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self.redis.set(key, value)
        except redis.RedisError as e:
            raise StorageUnavailableError(f"redis set failed for {key!r}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self.redis.delete(key)
        except redis.RedisError as e:
            raise StorageUnavailableError(f"redis delete failed for {key!r}: {e}") from e
