"""Хранилище настроек в Redis."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from guardbot.application.errors import StoreUnavailable
from guardbot.infrastructure.config.values import decode_bool, decode_int, encode_bool

logger = logging.getLogger(__name__)

# INCR с потолком одной атомарной операцией
INCREMENT_SCRIPT = """
local value = tonumber(redis.call('GET', KEYS[1]) or '0') or 0
value = math.min(value + 1, tonumber(ARGV[1]))
redis.call('SET', KEYS[1], tostring(value))
return value
"""


class RedisConfigStore:
    """Key/value хранилище в Redis, общее для нескольких процессов."""

    def __init__(self, client: redis.Redis, timeout: float = 5.0) -> None:
        self.client = client
        self.timeout = timeout
        self._increment = client.register_script(INCREMENT_SCRIPT)

    @classmethod
    def from_url(cls, url: str, timeout: float = 5.0) -> "RedisConfigStore":
        client = redis.from_url(url, decode_responses=True, socket_timeout=timeout)
        return cls(client, timeout)

    async def _call(self, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Ошибка Redis: {e!r}")
            raise StoreUnavailable(f"Redis недоступен: {e!r}") from e

    async def _get(self, key: str) -> Optional[str]:
        value = await self._call(self.client.get(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def get_bool(self, key: str, default: bool) -> bool:
        return decode_bool(await self._get(key), default)

    async def set_bool(self, key: str, value: bool) -> None:
        await self._call(self.client.set(key, encode_bool(value)))

    async def get_int(self, key: str, default: int) -> int:
        return decode_int(await self._get(key), default)

    async def set_int(self, key: str, value: int) -> None:
        await self._call(self.client.set(key, str(int(value))))

    async def get_text(self, key: str) -> Optional[str]:
        return await self._get(key)

    async def set_text(self, key: str, value: str) -> None:
        await self._call(self.client.set(key, value))

    async def delete(self, key: str) -> None:
        await self._call(self.client.delete(key))

    async def increment(self, key: str, ceiling: int) -> int:
        return int(await self._call(self._increment(keys=[key], args=[ceiling])))

    async def ping(self) -> None:
        await self._call(self.client.ping())
        logger.info("Подключение к Redis успешно установлено")

    async def close(self) -> None:
        await self.client.aclose()
