"""События чата: приветствие новых участников и ошибки хранилища."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import ExceptionTypeFilter
from aiogram.types import ErrorEvent, Message

from guardbot.application.chat_settings import ChatSettingsService
from guardbot.application.errors import StoreUnavailable
from guardbot.application.models import Identifier
from guardbot.utils.monitoring import capture_error

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = "Сервис временно недоступен, попробуйте позже."


def build_router(settings: ChatSettingsService) -> Router:
    router = Router(name="events")

    @router.message(F.new_chat_members)
    async def on_new_members(message: Message) -> None:
        chat_id = Identifier(message.chat.id)
        for member in message.new_chat_members:
            if member.is_bot:
                continue
            text = await settings.welcome_text(
                chat_id,
                name=member.full_name,
                username=f"@{member.username}" if member.username else member.full_name,
                user_id=Identifier(member.id),
                chat_title=message.chat.title or "",
            )
            if text is None:
                return
            await message.answer(text)

    @router.errors(ExceptionTypeFilter(StoreUnavailable))
    async def on_store_unavailable(event: ErrorEvent) -> None:
        capture_error(event.exception, {"update_id": event.update.update_id})
        message = event.update.message
        if message is not None:
            await message.answer(SERVICE_UNAVAILABLE)

    return router
