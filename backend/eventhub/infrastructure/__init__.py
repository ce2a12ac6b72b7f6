"""
Infrastructure layer - storage handles for the event container.
Keeps business logic clean from implementation details.
"""

from .storage import StorageBackend, MemoryStorage, FileStorage
from .redis_client import RedisStorage, RedisClient
from .factory import create_storage

__all__ = [
    'StorageBackend', 'MemoryStorage', 'FileStorage',
    'RedisStorage', 'RedisClient', 'create_storage',
]
