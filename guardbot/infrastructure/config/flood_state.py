"""Хранилища отметок времени для антифлуда."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import deque
from typing import Deque, Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from guardbot.application.errors import StoreUnavailable
from guardbot.application.models import FLOOD_WINDOW_MAX

logger = logging.getLogger(__name__)


class InMemoryFloodState:
    """Отметки в памяти процесса.

    Не разделяется между процессами и теряется при перезапуске. Между
    вытеснением и добавлением нет await, поэтому операция атомарна для
    event loop.
    """

    prune_threshold = 1024

    def __init__(self) -> None:
        self._buckets: Dict[str, Deque[float]] = {}
        self._next_prune: Optional[float] = None

    async def hit(self, key: str, now: float, window_seconds: int) -> int:
        cutoff = now - window_seconds
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = deque()
        while bucket and bucket[0] < cutoff:
            bucket.popleft()
        bucket.append(now)
        self._prune(now)
        return len(bucket)

    def _prune(self, now: float) -> None:
        # не чаще одного раза за максимальное окно
        if len(self._buckets) < self.prune_threshold:
            return
        if self._next_prune is not None and now < self._next_prune:
            return
        self._next_prune = now + FLOOD_WINDOW_MAX
        cutoff = now - FLOOD_WINDOW_MAX
        stale = [key for key, bucket in self._buckets.items() if bucket[-1] < cutoff]
        for key in stale:
            del self._buckets[key]
        if stale:
            logger.debug(f"Антифлуд: удалено {len(stale)} устаревших ключей")


class RedisFloodState:
    """Отметки в sorted set Redis, общие для всех процессов бота.

    Используйте с настенными часами (``time.time``), не с monotonic.
    """

    def __init__(self, client: redis.Redis, prefix: str = "flood", timeout: float = 5.0) -> None:
        self.client = client
        self.prefix = prefix
        self.timeout = timeout

    async def hit(self, key: str, now: float, window_seconds: int) -> int:
        redis_key = f"{self.prefix}:{key}"
        member = f"{now}:{uuid.uuid4().hex}"
        pipe = self.client.pipeline(transaction=True)
        pipe.zremrangebyscore(redis_key, "-inf", f"({now - window_seconds}")
        pipe.zadd(redis_key, {member: now})
        pipe.zcard(redis_key)
        pipe.expire(redis_key, window_seconds + 1)
        try:
            results = await asyncio.wait_for(pipe.execute(), timeout=self.timeout)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Ошибка Redis в антифлуде: {e!r}")
            raise StoreUnavailable(f"Redis недоступен: {e!r}") from e
        return int(results[2])
