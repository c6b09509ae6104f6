"""Журнал предупреждений."""

from __future__ import annotations

import logging

from guardbot.application import keys
from guardbot.application.contracts import ConfigStoreContract
from guardbot.application.models import WARN_CEILING, Identifier

logger = logging.getLogger(__name__)


class WarnLedger:
    """Счётчик предупреждений по паре (чат, пользователь).

    Журнал только считает: решение о бане по достижении порога принимает
    вызывающий код по возвращённому значению. Бан счётчик не сбрасывает.
    """

    def __init__(self, store: ConfigStoreContract) -> None:
        self.store = store

    async def warn(self, chat_id: Identifier, user_id: Identifier) -> int:
        """Добавить предупреждение.

        Инкремент выполняется атомарно на стороне хранилища.

        Returns:
            int: Новое число предупреждений, не больше 99
        """
        count = await self.store.increment(keys.warn_key(chat_id, user_id), WARN_CEILING)
        logger.info(f"Предупреждение {user_id} в чате {chat_id}: всего {count}")
        return count

    async def reset(self, chat_id: Identifier, user_id: Identifier) -> None:
        await self.store.delete(keys.warn_key(chat_id, user_id))
        logger.info(f"Предупреждения {user_id} в чате {chat_id} сброшены")

    async def get(self, chat_id: Identifier, user_id: Identifier) -> int:
        return await self.store.get_int(keys.warn_key(chat_id, user_id), 0)
