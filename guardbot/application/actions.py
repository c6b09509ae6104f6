"""Выполнение запросов к актуатору с типизированным результатом."""

from __future__ import annotations

import logging
from typing import Awaitable

from guardbot.application.errors import ActuatorError
from guardbot.application.models import ActionResult
from guardbot.utils.monitoring import track_actuator_failure

logger = logging.getLogger(__name__)

PERMISSION_HINT = "Проверьте, что бот является администратором с нужными правами."


async def perform(action: str, call: Awaitable[None]) -> ActionResult:
    """Выполнить действие, не пропуская ActuatorError дальше.

    Args:
        action: Название действия для логов и метрик
        call: Корутина вызова актуатора

    Returns:
        ActionResult: Успех или отказ с причиной
    """
    try:
        await call
    except ActuatorError as e:
        logger.warning(f"Действие {action} не выполнено: {e}")
        track_actuator_failure(action)
        return ActionResult.failure(action, str(e))
    return ActionResult.success(action)


def failure_reply(result: ActionResult, what: str) -> str:
    return f"Не удалось {what}: {result.reason}. {PERMISSION_HINT}"
