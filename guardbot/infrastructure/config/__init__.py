"""Хранилища настроек и состояния антифлуда."""

from guardbot.infrastructure.config.flood_state import InMemoryFloodState, RedisFloodState
from guardbot.infrastructure.config.memory_store import InMemoryConfigStore
from guardbot.infrastructure.config.redis_store import RedisConfigStore
from guardbot.infrastructure.config.sqlite_store import SqliteConfigStore

__all__ = [
    "InMemoryConfigStore",
    "InMemoryFloodState",
    "RedisConfigStore",
    "RedisFloodState",
    "SqliteConfigStore",
]
