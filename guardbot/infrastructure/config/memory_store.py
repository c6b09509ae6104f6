"""Хранилище настроек в памяти процесса."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from guardbot.infrastructure.config.values import decode_bool, decode_int, encode_bool


class InMemoryConfigStore:
    """Key/value хранилище в словаре. Данные теряются при перезапуске."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})
        self._lock = asyncio.Lock()

    async def get_bool(self, key: str, default: bool) -> bool:
        return decode_bool(self.data.get(key), default)

    async def set_bool(self, key: str, value: bool) -> None:
        self.data[key] = encode_bool(value)

    async def get_int(self, key: str, default: int) -> int:
        return decode_int(self.data.get(key), default)

    async def set_int(self, key: str, value: int) -> None:
        self.data[key] = str(int(value))

    async def get_text(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set_text(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def increment(self, key: str, ceiling: int) -> int:
        async with self._lock:
            value = min(decode_int(self.data.get(key), 0) + 1, ceiling)
            self.data[key] = str(value)
            return value

    async def close(self) -> None:
        return None
