"""Middleware, пропускающий каждое сообщение через конвейер модерации."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject

from guardbot.application.contracts import ModerationPipelineContract
from guardbot.presentation.mapping import to_incoming

logger = logging.getLogger(__name__)


class ModerationMiddleware(BaseMiddleware):
    """Проверки до обработчиков и автоудаление команд после них."""

    def __init__(self, pipeline: ModerationPipelineContract) -> None:
        self.pipeline = pipeline

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        if not isinstance(event, Message):
            return await handler(event, data)

        incoming = to_incoming(event)
        verdict = await self.pipeline.process(incoming)
        if verdict.consumed:
            return None

        result = await handler(event, data)
        await self.pipeline.after_dispatch(incoming, verdict)
        return result
