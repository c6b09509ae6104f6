"""Запрос статуса участника чата."""

from __future__ import annotations

import asyncio

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from guardbot.application.errors import AdminLookupError
from guardbot.application.models import Identifier


class TelegramAdminLookup:
    def __init__(self, bot: Bot, timeout: float = 10.0) -> None:
        self.bot = bot
        self.timeout = timeout

    async def get_member_status(self, chat_id: Identifier, user_id: Identifier) -> str:
        """Статус участника: creator, administrator, member...

        Raises:
            AdminLookupError: запрос к API не удался
        """
        try:
            member = await asyncio.wait_for(
                self.bot.get_chat_member(chat_id.value, user_id.value), timeout=self.timeout
            )
        except TelegramAPIError as e:
            raise AdminLookupError(e.message) from e
        except asyncio.TimeoutError as e:
            raise AdminLookupError("таймаут запроса статуса") from e
        return getattr(member.status, "value", member.status)
