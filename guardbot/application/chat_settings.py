"""Настройки чата поверх key/value хранилища.

Запись и чтение не транзакционны: два одновременных переключения одного
ключа разрешаются по правилу «последняя запись побеждает».
"""

from __future__ import annotations

import logging
from typing import Optional

from guardbot.application import keys
from guardbot.application.contracts import ConfigStoreContract
from guardbot.application.errors import ConfigurationError
from guardbot.application.models import (
    FLOOD_LIMIT_DEFAULT,
    FLOOD_LIMIT_MAX,
    FLOOD_LIMIT_MIN,
    FLOOD_WINDOW_DEFAULT,
    FLOOD_WINDOW_MAX,
    FLOOD_WINDOW_MIN,
    ChatConfig,
    Identifier,
    ToggleKey,
    clamp,
)

logger = logging.getLogger(__name__)

DEFAULT_WELCOME_TEMPLATE = "Добро пожаловать, {name}, в {chat}!"
DEFAULT_RULES = "Правила пока не установлены."
SETFLOOD_USAGE = "Использование: /setflood <лимит 2-20> <секунды 3-60>"


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_welcome(template: Optional[str], name: str, username: str, user_id, chat: str) -> str:
    """Подставить данные участника в шаблон приветствия.

    Неизвестные плейсхолдеры остаются как есть.
    """
    values = _Placeholders(name=name, username=username, id=str(user_id), chat=chat)
    try:
        return (template or DEFAULT_WELCOME_TEMPLATE).format_map(values)
    except (ValueError, IndexError, AttributeError):
        logger.warning("Шаблон приветствия некорректен, используется стандартный")
        return DEFAULT_WELCOME_TEMPLATE.format_map(values)


class ChatSettingsService:
    """Загрузка ChatConfig и запись настроек с ограничением диапазонов."""

    def __init__(self, store: ConfigStoreContract) -> None:
        self.store = store

    async def load(self, chat_id: Identifier) -> ChatConfig:
        """Загрузить настройки чата.

        Args:
            chat_id: ID чата

        Returns:
            ChatConfig: Настройки с подставленными значениями по умолчанию
        """
        flags = {}
        for toggle in ToggleKey:
            flags[toggle] = await self.store.get_bool(
                keys.toggle_key(toggle, chat_id), toggle.default
            )
        window = await self.store.get_int(keys.flood_window_key(chat_id), FLOOD_WINDOW_DEFAULT)
        limit = await self.store.get_int(keys.flood_limit_key(chat_id), FLOOD_LIMIT_DEFAULT)
        return ChatConfig(
            welcome_enabled=flags[ToggleKey.WELCOME],
            antilink_enabled=flags[ToggleKey.ANTILINK],
            lockmedia_enabled=flags[ToggleKey.LOCKMEDIA],
            autodelete_commands_enabled=flags[ToggleKey.AUTODELCMD],
            antiflood_enabled=flags[ToggleKey.ANTIFLOOD],
            flood_window_seconds=clamp(window, FLOOD_WINDOW_MIN, FLOOD_WINDOW_MAX),
            flood_limit=clamp(limit, FLOOD_LIMIT_MIN, FLOOD_LIMIT_MAX),
            rules_text=await self.store.get_text(keys.rules_key(chat_id)),
            welcome_template=await self.store.get_text(keys.welcome_text_key(chat_id)),
        )

    async def set_toggle(self, chat_id: Identifier, toggle: ToggleKey, value: bool) -> None:
        await self.store.set_bool(keys.toggle_key(toggle, chat_id), value)
        logger.info(f"Чат {chat_id}: {toggle.value} -> {value}")

    async def flip_toggle(self, chat_id: Identifier, toggle: ToggleKey) -> bool:
        """Инвертировать переключатель и вернуть новое значение."""
        key = keys.toggle_key(toggle, chat_id)
        value = not await self.store.get_bool(key, toggle.default)
        await self.store.set_bool(key, value)
        logger.info(f"Чат {chat_id}: {toggle.value} -> {value}")
        return value

    async def set_flood(self, chat_id: Identifier, limit: int, window_seconds: int) -> tuple:
        """Сохранить лимит и окно антифлуда.

        Значения ниже минимума отклоняются, выше максимума обрезаются.

        Raises:
            ConfigurationError: limit < 2 или window_seconds < 3

        Returns:
            tuple: Сохранённые (limit, window_seconds)
        """
        if limit < FLOOD_LIMIT_MIN or window_seconds < FLOOD_WINDOW_MIN:
            raise ConfigurationError(SETFLOOD_USAGE)
        limit = min(limit, FLOOD_LIMIT_MAX)
        window_seconds = min(window_seconds, FLOOD_WINDOW_MAX)
        await self.store.set_int(keys.flood_limit_key(chat_id), limit)
        await self.store.set_int(keys.flood_window_key(chat_id), window_seconds)
        logger.info(f"Чат {chat_id}: антифлуд {limit} сообщений / {window_seconds} с")
        return limit, window_seconds

    async def set_rules(self, chat_id: Identifier, text: str) -> None:
        await self.store.set_text(keys.rules_key(chat_id), text)

    async def set_welcome_template(self, chat_id: Identifier, text: str) -> None:
        await self.store.set_text(keys.welcome_text_key(chat_id), text)

    async def rules(self, chat_id: Identifier) -> str:
        return await self.store.get_text(keys.rules_key(chat_id)) or DEFAULT_RULES

    async def welcome_text(
        self,
        chat_id: Identifier,
        name: str,
        username: str,
        user_id: Identifier,
        chat_title: str,
    ) -> Optional[str]:
        """Текст приветствия или None, если приветствие выключено."""
        enabled = await self.store.get_bool(
            keys.toggle_key(ToggleKey.WELCOME, chat_id), ToggleKey.WELCOME.default
        )
        if not enabled:
            return None
        template = await self.store.get_text(keys.welcome_text_key(chat_id))
        return render_welcome(template, name, username, user_id, chat_title)
