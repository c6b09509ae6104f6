"""Исполнение действий модерации через Telegram Bot API."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import ChatPermissions

from guardbot.application.errors import ActuatorError
from guardbot.application.models import PURGE_LIMIT, Identifier

logger = logging.getLogger(__name__)

MUTED = ChatPermissions(can_send_messages=False)

UNMUTED = ChatPermissions(
    can_send_messages=True,
    can_send_audios=True,
    can_send_documents=True,
    can_send_photos=True,
    can_send_videos=True,
    can_send_video_notes=True,
    can_send_voice_notes=True,
    can_send_polls=True,
    can_send_other_messages=True,
    can_add_web_page_previews=True,
)


class TelegramActuator:
    """Актуатор поверх aiogram Bot.

    Каждый вызов ограничен таймаутом; отказ API и таймаут превращаются в
    ActuatorError.
    """

    def __init__(self, bot: Bot, timeout: float = 10.0) -> None:
        self.bot = bot
        self.timeout = timeout

    async def _call(self, action: str, awaitable) -> None:
        try:
            await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TelegramAPIError as e:
            raise ActuatorError(e.message) from e
        except asyncio.TimeoutError as e:
            raise ActuatorError(f"таймаут {action}") from e

    async def delete_message(self, chat_id: Identifier, message_id: int) -> None:
        await self._call("delete", self.bot.delete_message(chat_id.value, message_id))

    async def delete_messages(self, chat_id: Identifier, message_ids: List[int]) -> None:
        for start in range(0, len(message_ids), PURGE_LIMIT):
            chunk = message_ids[start:start + PURGE_LIMIT]
            await self._call("purge", self.bot.delete_messages(chat_id.value, chunk))

    async def mute(self, chat_id: Identifier, user_id: Identifier, duration: timedelta) -> None:
        until = datetime.now(timezone.utc) + duration
        await self._call(
            "mute",
            self.bot.restrict_chat_member(
                chat_id.value, user_id.value, permissions=MUTED, until_date=until
            ),
        )

    async def unmute(self, chat_id: Identifier, user_id: Identifier) -> None:
        await self._call(
            "unmute",
            self.bot.restrict_chat_member(chat_id.value, user_id.value, permissions=UNMUTED),
        )

    async def ban(self, chat_id: Identifier, user_id: Identifier) -> None:
        await self._call("ban", self.bot.ban_chat_member(chat_id.value, user_id.value))

    async def kick(self, chat_id: Identifier, user_id: Identifier) -> None:
        await self._call("kick", self.bot.ban_chat_member(chat_id.value, user_id.value))
        await self._call(
            "kick",
            self.bot.unban_chat_member(chat_id.value, user_id.value, only_if_banned=True),
        )

    async def leave_chat(self, chat_id: Identifier) -> None:
        logger.info(f"Бот покидает чат {chat_id}")
        await self._call("leave", self.bot.leave_chat(chat_id.value))
