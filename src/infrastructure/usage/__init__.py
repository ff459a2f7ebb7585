"""Usage state storages (token bucket + quota per credential)."""

from src.infrastructure.usage.in_memory_usage_storage import InMemoryUsageStorage
from src.infrastructure.usage.redis_usage_storage import RedisUsageStorage

__all__ = ["InMemoryUsageStorage", "RedisUsageStorage"]
