"""Слой presentation: роутеры aiogram."""

from __future__ import annotations

from aiogram import Dispatcher

from guardbot.presentation import commands, events
from guardbot.presentation.middleware import ModerationMiddleware


def setup_dispatcher(dp: Dispatcher, services) -> Dispatcher:
    """Подключить конвейер модерации и роутеры к диспетчеру."""
    dp.message.outer_middleware(ModerationMiddleware(services.pipeline))
    dp.include_router(commands.build_router(services.commands))
    dp.include_router(events.build_router(services.settings))
    return dp


__all__ = ["setup_dispatcher", "ModerationMiddleware"]
