"""Разбор аргументов команд.

Все функции бросают ConfigurationError с текстом подсказки до того, как
команда что-либо изменит.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple

from guardbot.application.errors import ConfigurationError
from guardbot.application.models import (
    DEFAULT_MUTE,
    MAX_MUTE,
    PURGE_LIMIT,
    CommandContext,
    Identifier,
)

DURATION_PATTERN = re.compile(r"^(\d+)([mhd])$", re.IGNORECASE)

_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400}

_ON = {"on", "1", "true", "yes"}
_OFF = {"off", "0", "false", "no"}


def parse_switch(args: Sequence[str], usage: str) -> bool:
    """Разобрать аргумент on/off."""
    if not args:
        raise ConfigurationError(usage)
    value = args[0].lower()
    if value in _ON:
        return True
    if value in _OFF:
        return False
    raise ConfigurationError(usage)


def resolve_target(ctx: CommandContext, usage: str) -> Tuple[Identifier, Tuple[str, ...]]:
    """Определить цель команды.

    Автор сообщения, на которое ответили, важнее числового аргумента.

    Returns:
        tuple: ID цели и оставшиеся аргументы
    """
    if ctx.reply_to_user_id is not None:
        return ctx.reply_to_user_id, tuple(ctx.args)
    if ctx.args:
        try:
            return Identifier.parse(ctx.args[0]), tuple(ctx.args[1:])
        except ValueError:
            pass
    raise ConfigurationError(usage)


def parse_duration(raw: Optional[str]) -> timedelta:
    """Парсинг длительности мута.

    Args:
        raw: Строка вида 30m, 1h, 7d

    Returns:
        timedelta: Длительность, 10 минут если строка пуста или некорректна,
        не больше 366 дней
    """
    if not raw:
        return DEFAULT_MUTE
    match = DURATION_PATTERN.match(raw.strip())
    if not match:
        return DEFAULT_MUTE
    value = int(match.group(1))
    if value <= 0:
        return DEFAULT_MUTE
    seconds = value * _UNIT_SECONDS[match.group(2).lower()]
    if seconds >= MAX_MUTE.total_seconds():
        return MAX_MUTE
    return timedelta(seconds=seconds)


def format_duration(duration: timedelta) -> str:
    seconds = int(duration.total_seconds())
    if seconds % 86400 == 0:
        return f"{seconds // 86400}d"
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    return f"{seconds // 60}m"


def parse_setflood(args: Sequence[str], usage: str) -> Tuple[int, int]:
    if len(args) < 2:
        raise ConfigurationError(usage)
    try:
        return int(args[0]), int(args[1])
    except ValueError:
        raise ConfigurationError(usage) from None


def purge_message_ids(ctx: CommandContext, usage: str) -> List[int]:
    """Список id сообщений для очистки, не более 100.

    С числом: n сообщений перед командой. Без числа, в ответ на
    сообщение: от него до команды.
    """
    if ctx.args:
        try:
            count = int(ctx.args[0])
        except ValueError:
            raise ConfigurationError(usage) from None
        if count < 1:
            raise ConfigurationError(usage)
        count = min(count, PURGE_LIMIT)
        first = max(1, ctx.message_id - count)
        return list(range(first, ctx.message_id))
    if ctx.reply_to_message_id is not None:
        first = max(ctx.reply_to_message_id, ctx.message_id - PURGE_LIMIT)
        return list(range(first, ctx.message_id))
    raise ConfigurationError(usage)
