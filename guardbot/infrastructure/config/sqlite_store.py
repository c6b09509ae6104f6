"""Хранилище настроек в SQLite."""

from __future__ import annotations

from typing import Optional

from guardbot.database.db import Database
from guardbot.infrastructure.config.values import decode_bool, decode_int, encode_bool


class SqliteConfigStore:
    """Key/value хранилище поверх таблицы ``kv``."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def _get(self, key: str) -> Optional[str]:
        row = await self.db.fetch_one("SELECT value FROM kv WHERE key = ?", (key,))
        return row[0] if row else None

    async def _set(self, key: str, value: str) -> None:
        await self.db.execute(
            "INSERT INTO kv (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )

    async def get_bool(self, key: str, default: bool) -> bool:
        return decode_bool(await self._get(key), default)

    async def set_bool(self, key: str, value: bool) -> None:
        await self._set(key, encode_bool(value))

    async def get_int(self, key: str, default: int) -> int:
        return decode_int(await self._get(key), default)

    async def set_int(self, key: str, value: int) -> None:
        await self._set(key, str(int(value)))

    async def get_text(self, key: str) -> Optional[str]:
        return await self._get(key)

    async def set_text(self, key: str, value: str) -> None:
        await self._set(key, value)

    async def delete(self, key: str) -> None:
        await self.db.execute("DELETE FROM kv WHERE key = ?", (key,))

    async def increment(self, key: str, ceiling: int) -> int:
        """Атомарный инкремент одним UPSERT-запросом."""
        row = await self.db.execute_returning(
            "INSERT INTO kv (key, value) VALUES (?, '1') "
            "ON CONFLICT(key) DO UPDATE SET "
            "value = CAST(MIN(CAST(value AS INTEGER) + 1, ?) AS TEXT) "
            "RETURNING value",
            (key, ceiling),
        )
        return int(row[0])

    async def close(self) -> None:
        await self.db.close()
