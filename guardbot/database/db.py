"""Модуль для работы с базой данных."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, List, Optional, Set, Tuple

import aiosqlite

from guardbot.application.errors import StoreUnavailable

logger = logging.getLogger(__name__)

SCHEMA = '''
    CREATE TABLE IF NOT EXISTS kv (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
'''


class Database:
    """Пул соединений SQLite."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        pool_size: Optional[int] = None,
        timeout: float = 5.0,
    ):
        """Инициализация подключения к базе данных."""
        self.db_path = db_path or os.getenv("DB_PATH", os.path.join("data", "guardbot.db"))
        self.pool_size = pool_size or int(os.getenv('DB_POOL_SIZE', '5'))
        self.timeout = timeout
        self.pool: Optional[List[aiosqlite.Connection]] = None
        self._closing: Set[asyncio.Future] = set()

    async def setup(self):
        """Создание пула соединений и схемы."""
        try:
            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            self.pool = []
            for _ in range(self.pool_size):
                conn = await aiosqlite.connect(self.db_path)
                self.pool.append(conn)

            async with self.get_connection() as conn:
                await conn.execute(SCHEMA)
                await conn.commit()

            logger.info(f"База данных SQLite {self.db_path} успешно инициализирована")
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Ошибка при инициализации SQLite: {str(e)}")
            raise StoreUnavailable(f"SQLite недоступен: {e}") from e

    @asynccontextmanager
    async def get_connection(self):
        """Получение соединения из пула.

        Соединение, на котором запрос прервался (ошибка или таймаут), в пул
        не возвращается: поток aiosqlite может ещё выполнять запрос.
        """
        if self.pool:
            conn = self.pool.pop()
        else:
            # Пул не инициализирован или пуст: создаем новое соединение
            conn = await aiosqlite.connect(self.db_path)
        try:
            yield conn
        except BaseException:
            self._discard(conn)
            raise

        # Возвращаем соединение в пул
        if self.pool is not None and len(self.pool) < self.pool_size:
            self.pool.append(conn)
        else:
            await conn.close()

    def _discard(self, conn: aiosqlite.Connection) -> None:
        # закрытие дождется окончания запроса в потоке соединения
        task = asyncio.ensure_future(conn.close())
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def _run(self, query: str, params: Tuple, fetch: bool, commit: bool):
        async with self.get_connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone() if fetch else None
            await cursor.close()
            if commit:
                await conn.commit()
            return row

    async def _guarded(self, query: str, params: Tuple, fetch: bool, commit: bool):
        try:
            return await asyncio.wait_for(
                self._run(query, params, fetch, commit), timeout=self.timeout
            )
        except (aiosqlite.Error, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Ошибка выполнения SQL запроса: {e!r}")
            logger.error(f"Запрос: {query}, Параметры: {params}")
            raise StoreUnavailable(f"SQLite недоступен: {e!r}") from e

    async def execute(self, query: str, params: Tuple = ()) -> None:
        """Выполнение SQL запроса с фиксацией."""
        await self._guarded(query, params, fetch=False, commit=True)

    async def fetch_one(self, query: str, params: Tuple = ()) -> Optional[Tuple[Any, ...]]:
        """Получение одной записи."""
        return await self._guarded(query, params, fetch=True, commit=False)

    async def execute_returning(self, query: str, params: Tuple = ()) -> Optional[Tuple[Any, ...]]:
        """Изменяющий запрос с RETURNING: строка результата и фиксация."""
        return await self._guarded(query, params, fetch=True, commit=True)

    async def close(self):
        """Закрытие всех соединений."""
        if self.pool:
            for conn in self.pool:
                try:
                    await conn.close()
                except aiosqlite.Error as e:
                    logger.error(f"Ошибка при закрытии соединения: {e}")
        self.pool = None
        if self._closing:
            results = await asyncio.gather(*self._closing, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Ошибка при закрытии соединения: {result}")
