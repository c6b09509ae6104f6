"""Антифлуд: скользящее окно по паре (чат, пользователь)."""

from __future__ import annotations

import time
from typing import Callable, Optional

from guardbot.application.contracts import FloodStateContract
from guardbot.application.models import FLOOD_WINDOW_MAX, FLOOD_WINDOW_MIN, Identifier, clamp


class FloodGuard:
    """Проверка частоты сообщений.

    Счётчик не сбрасывается при срабатывании: пока в окне больше ``limit``
    отметок, каждое новое сообщение снова превышает лимит.
    """

    def __init__(
        self,
        state: FloodStateContract,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.state = state
        self.clock = clock or time.monotonic

    async def check(
        self,
        chat_id: Identifier,
        user_id: Identifier,
        window_seconds: int,
        limit: int,
    ) -> bool:
        """Зарегистрировать сообщение и проверить лимит.

        Args:
            chat_id: ID чата
            user_id: ID пользователя
            window_seconds: Длина окна, приводится к [3, 60]
            limit: Допустимое число сообщений в окне

        Returns:
            bool: True если лимит превышен
        """
        window_seconds = clamp(window_seconds, FLOOD_WINDOW_MIN, FLOOD_WINDOW_MAX)
        count = await self.state.hit(f"{chat_id}:{user_id}", self.clock(), window_seconds)
        return count > limit
